"""
Main execution loop: one order + SSS application per iteration
"""

from typing import Optional

from playwright.sync_api import Error as PlaywrightError

from . import config
from .app_id import acquire_app_id
from .browser_session import BrowserSession
from .data_generator import generate_order_data
from .data_handler import SuccessLog
from .error_handler import ErrorHandler, AutomationError
from .order_portal import OrderPortal
from .run_params import RunParams, describe
from .sss_form import SSSApplicationForm

LAUNCH = "launch"
CONNECT = "connect"


class AutomationApp:
    """Drives the full order -> payment -> SSS application flow run_times times"""

    def __init__(self, params: RunParams, browser_mode: str = LAUNCH, launch_browser: bool = False,
                 error_handler: Optional[ErrorHandler] = None,
                 session: Optional[BrowserSession] = None,
                 success_log: Optional[SuccessLog] = None):
        self.params = params
        self.browser_mode = browser_mode
        self.launch_browser = launch_browser
        self.error_handler = error_handler or ErrorHandler(config.OUTPUT_FOLDER)
        self.session = session or BrowserSession(self.error_handler)
        self.success_log = success_log or SuccessLog(config.SUCCESS_LOG_FILE, self.error_handler)
        self.completed = 0
        self._page = None
        self._used_names = set()

    def _print_progress(self, message: str, step: int = None, total: int = None):
        if step is not None and total is not None:
            print(f"[{step}/{total}] {message}")
        else:
            print(message)

    def start_browser(self):
        if self.browser_mode == CONNECT:
            self.session.connect(launch_browser=self.launch_browser)
        else:
            self.session.launch()
        self._page = self.session.first_page()
        OrderPortal(self._page).open_home()

    def run_iteration(self) -> str:
        """One complete application; returns the acquired App ID"""
        page = self.session.first_page()
        page.bring_to_front()
        self._page = page

        data = generate_order_data(self.params.tel, taken=self._used_names)
        self._used_names.add(data.full_name)
        portal = OrderPortal(page)
        self._page = portal.create_order(data)
        portal.process_payment(data.full_name)
        portal.open_sss_page(data.full_name)

        sss_page = self.session.latest_page()
        self._page = sss_page
        form = SSSApplicationForm(sss_page, self.session.context)
        form.wait_until_loaded()

        app_id = acquire_app_id(sss_page)
        form.submit(app_id, self.params, data)
        self.success_log.append(data, app_id)
        return app_id

    def run(self) -> int:
        """Main execution function; returns a process exit code"""
        print("=" * 70)
        print(" " * 20 + "PRM ORDER / SSS APPLICATION BOT")
        print("=" * 70)
        print(describe(self.params) + "\n")

        total = self.params.run_times
        exit_code = 0
        try:
            self.start_browser()

            for i in range(1, total + 1):
                if self.error_handler.check_shutdown_requested():
                    print("⚠️  Shutdown requested, not starting another iteration")
                    break

                self._print_progress("===== Starting iteration =====", i, total)
                app_id = self.run_iteration()
                self.completed += 1
                self._print_progress(f"===== Iteration succeeded (App ID {app_id}) =====", i, total)

            print(f"\n✓ Finished {self.completed}/{total} iteration(s)")

        except KeyboardInterrupt:
            print("\n\n⚠️  Script interrupted by user (KeyboardInterrupt)")
            self.error_handler.log_error("KEYBOARD_INTERRUPT", "User interrupted the script")
            exit_code = 130
        except AutomationError as e:
            print(f"\n✗ {str(e)}")
            self.error_handler.log_error("AUTOMATION_ERROR", str(e), e)
            self.error_handler.capture_screenshot(self._page, type(e).__name__)
            exit_code = 1
        except PlaywrightError as e:
            print(f"\n✗ Browser step failed: {str(e)}")
            self.error_handler.handle_playwright_error(self._page, e, f"iteration {self.completed + 1}")
            exit_code = 1
        except Exception as e:
            print(f"\n✗ Unexpected error: {str(e)}")
            self.error_handler.log_error("UNEXPECTED_ERROR", f"Unexpected error in main execution: {str(e)}", e)
            exit_code = 1
        finally:
            print("\n" + "=" * 60)
            print("CLEANUP")
            print("=" * 60)
            self.session.close()

            if exit_code == 0:
                print("\n✓ Application exited successfully")
            else:
                print(f"\n⚠️  Application exited with code {exit_code}")
                print(f"Check error log: {self.error_handler.log_file}")

        return exit_code
