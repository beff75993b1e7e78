"""
Error handling utilities for the PRM order bot
"""

import os
import sys
import time
import signal
import logging
import threading
import traceback
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Optional, Callable, Any


FRAME_DETACHED_MESSAGE = "Frame has been detached"


class AutomationError(Exception):
    """Base error for a failed automation iteration"""


class AppIdExhaustedError(AutomationError):
    """No usable App ID was found within the attempt limit"""

    def __init__(self, attempts: int):
        super().__init__(f"No unused App ID found after {attempts} attempts")
        self.attempts = attempts


class SSSPageNotOpenedError(AutomationError):
    """The SSS application tab did not open on the expected page"""

    def __init__(self, url: str):
        super().__init__(f"SSS app page did not open correctly (current URL: {url})")
        self.url = url


def is_frame_detached(error: BaseException) -> bool:
    """True when Playwright reports the page frame was detached"""
    return FRAME_DETACHED_MESSAGE in str(error)


class ErrorHandler:
    """Centralized error handling and logging"""

    def __init__(self, output_folder: str = "output", handle_signals: bool = True):
        """Initialize error handler"""
        self.output_folder = Path(output_folder)
        self.output_folder.mkdir(parents=True, exist_ok=True)
        self.log_file = self.output_folder / "error_log.txt"
        self._setup_logger()
        self.screenshot_folder = self.output_folder / "screenshots"
        self.screenshot_folder.mkdir(exist_ok=True)
        self._shutdown_requested = False

        # Signal handlers can only be installed from the main thread
        # (Streamlit runs scripts in a worker thread)
        if handle_signals and threading.current_thread() is threading.main_thread():
            signal.signal(signal.SIGINT, self._signal_handler)
            signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle interrupt signals gracefully"""
        self._shutdown_requested = True
        self.log_error("INTERRUPT", f"Received signal {signum}. Stopping after the current iteration...")
        print("\n\n⚠️  Interrupt received. Finishing the current step and shutting down...")

    def _setup_logger(self):
        """Setup logging configuration"""
        self.logger = logging.getLogger("PrmOrderBot")
        self.logger.setLevel(logging.ERROR)

        # Handlers are shared by every ErrorHandler writing to the same file
        log_path = os.path.abspath(self.log_file)
        for handler in self.logger.handlers:
            if getattr(handler, "baseFilename", None) == log_path:
                return

        file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        file_handler.setLevel(logging.ERROR)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.ERROR)

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def log_error(self, error_type: str, message: str, exception: Optional[BaseException] = None):
        """Log error with full traceback"""
        error_msg = f"[{error_type}] {message}"

        if exception:
            error_msg += f"\nException: {str(exception)}"
            error_msg += f"\nTraceback:\n{''.join(traceback.format_exception(type(exception), exception, exception.__traceback__))}"

        self.logger.error(error_msg)
        return error_msg

    def capture_screenshot(self, page, error_type: str = "ERROR") -> Optional[str]:
        """Capture screenshot with timestamp"""
        try:
            if page is None or page.is_closed():
                return None

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"error_{error_type}_{timestamp}.png"
            filepath = self.screenshot_folder / filename

            page.screenshot(path=str(filepath), full_page=True)
            print(f"📸 Screenshot saved: {filepath}")
            return str(filepath)
        except Exception as e:
            self.log_error("SCREENSHOT_ERROR", f"Failed to capture screenshot: {str(e)}")
            return None

    def check_shutdown_requested(self) -> bool:
        """Check if shutdown was requested"""
        return self._shutdown_requested

    def handle_playwright_error(self, page, error: BaseException, context: str = ""):
        """Log a browser step failure and keep a screenshot of the page"""
        error_type = type(error).__name__
        message = f"Playwright error in {context}: {str(error)}"

        self.log_error("PLAYWRIGHT_ERROR", message, error)
        screenshot = self.capture_screenshot(page, error_type)

        return {
            'error_type': error_type,
            'message': message,
            'context': context,
            'screenshot': screenshot,
            'timestamp': datetime.now().isoformat()
        }

    def handle_file_error(self, error: BaseException, filepath: str, operation: str = "read"):
        """Handle file I/O errors"""
        error_type = type(error).__name__
        message = f"File {operation} error for {filepath}: {str(error)}"

        self.log_error("FILE_ERROR", message, error)

        return {
            'error_type': error_type,
            'message': message,
            'filepath': filepath,
            'operation': operation,
            'timestamp': datetime.now().isoformat()
        }


def retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    exceptions: tuple = (Exception,)
):
    """
    Decorator for retrying functions with exponential backoff

    Args:
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds
        backoff_factor: Multiplier for delay after each retry
        exceptions: Tuple of exceptions to catch and retry on
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_retries:
                        print(f"✗ All {max_retries + 1} attempts failed")
                        raise
                    print(f"⚠️  Attempt {attempt + 1}/{max_retries + 1} failed: {str(e)}")
                    print(f"   Retrying in {delay:.2f} seconds...")
                    time.sleep(delay)
                    delay *= backoff_factor

        return wrapper
    return decorator
