"""
Browser session for the bot: either a launched persistent profile or a
browser already listening on a remote-debugging port.
"""

import shutil
import subprocess
import time
from pathlib import Path
from typing import Optional

import requests
from playwright.sync_api import sync_playwright, Error as PlaywrightError

from . import config
from .error_handler import ErrorHandler, retry_with_backoff


class BrowserSession:
    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 user_data_dir: str = config.USER_DATA_DIR,
                 channel: str = config.BROWSER_CHANNEL,
                 cdp_port: int = config.CDP_PORT):
        self.error_handler = error_handler or ErrorHandler(config.OUTPUT_FOLDER)
        self.user_data_dir = Path(user_data_dir)
        self.channel = channel
        self.cdp_port = cdp_port
        self.playwright = None
        self.browser = None
        self.context = None
        self.browser_process = None
        self._connected = False

    @property
    def cdp_url(self) -> str:
        return f"http://localhost:{self.cdp_port}"

    def _start_playwright(self):
        if self.playwright is None:
            self.playwright = sync_playwright().start()

    def launch(self):
        """Launch the browser with the persistent profile so logged-in sessions are reused"""
        self._start_playwright()
        try:
            self.user_data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.error_handler.handle_file_error(e, str(self.user_data_dir), "create")

        try:
            print(f"🔄 Launching {self.channel} with profile: {self.user_data_dir}")
            self.context = self.playwright.chromium.launch_persistent_context(
                str(self.user_data_dir),
                headless=config.HEADLESS_MODE,
                channel=self.channel,
            )
            self.browser = self.context.browser
        except PlaywrightError as e:
            self.error_handler.log_error("BROWSER_LAUNCH", "Failed to launch persistent context", e)
            print("⚠️  Persistent profile failed, removing it and using a fresh browser...")
            shutil.rmtree(self.user_data_dir, ignore_errors=True)
            self.browser = self.playwright.chromium.launch(
                headless=config.HEADLESS_MODE,
                channel=self.channel,
            )
            self.context = self.browser.new_context()

        print("✓ Browser launched")
        return self.context

    def start_debug_browser(self, executable: str = config.BROWSER_PATH):
        """Start a browser process listening on the remote-debugging port"""
        if not executable:
            raise ValueError("BROWSER_PATH is not set; cannot launch a debugging browser")
        self.browser_process = subprocess.Popen(
            [
                executable,
                f"--remote-debugging-port={self.cdp_port}",
                "--no-first-run",
                "--no-default-browser-check",
                f"--user-data-dir={self.user_data_dir}",
            ],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        print(f"✓ Browser started on debugging port {self.cdp_port}")

    def wait_for_cdp_ready(self, timeout: int = config.CDP_READY_TIMEOUT) -> bool:
        """Poll the DevTools endpoint until the browser answers"""
        for _ in range(timeout):
            try:
                res = requests.get(f"{self.cdp_url}/json/version", timeout=2)
                if res.status_code == 200:
                    return True
            except requests.RequestException:
                pass
            time.sleep(1)
        return False

    @retry_with_backoff(max_retries=2, initial_delay=2.0, exceptions=(PlaywrightError,))
    def _connect_over_cdp(self):
        return self.playwright.chromium.connect_over_cdp(self.cdp_url)

    def connect(self, launch_browser: bool = False):
        """Attach to a browser already listening on the debugging port"""
        if launch_browser:
            self.start_debug_browser()
        if not self.wait_for_cdp_ready():
            raise ConnectionError(
                f"No browser is listening on {self.cdp_url}. "
                f"Start it with --remote-debugging-port={self.cdp_port}"
            )

        self._start_playwright()
        print(f"🔄 Connecting to browser at {self.cdp_url}")
        self.browser = self._connect_over_cdp()
        self._connected = True
        self.context = self.browser.contexts[0] if self.browser.contexts else self.browser.new_context()
        print("✓ Connected to browser")
        return self.context

    def first_page(self):
        """First open page of the context, opening one when there is none or it was closed"""
        page = self.context.pages[0] if self.context.pages else None
        if page is None or page.is_closed():
            page = self.context.new_page()
        return page

    def latest_page(self):
        """Most recently opened tab"""
        return self.context.pages[-1]

    def close(self):
        """Close browser and cleanup; never raises"""
        cleanup_errors = []

        if self.context and not self._connected:
            try:
                self.context.close()
                print("✓ Context closed")
            except Exception as e:
                cleanup_errors.append(f"Error closing context: {str(e)}")

        if self.browser:
            try:
                # for a CDP connection this only disconnects
                self.browser.close()
                print("✓ Browser closed")
            except Exception as e:
                cleanup_errors.append(f"Error closing browser: {str(e)}")

        if self.playwright:
            try:
                self.playwright.stop()
                print("✓ Playwright stopped")
            except Exception as e:
                cleanup_errors.append(f"Error stopping playwright: {str(e)}")

        # a debugging browser we started is left running for the user; only reap it once it has exited
        if self.browser_process is not None and self.browser_process.poll() is not None:
            self.browser_process = None

        self.context = None
        self.browser = None
        self.playwright = None

        if cleanup_errors:
            print(f"⚠️  Cleanup completed with {len(cleanup_errors)} warning(s)")
            for error in cleanup_errors:
                print(f"   - {error}")
                self.error_handler.log_error("CLEANUP_ERROR", error)
