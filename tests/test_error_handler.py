"""Tests for error handling helpers."""

from unittest.mock import MagicMock

import pytest

from prm_order_bot import error_handler as eh
from prm_order_bot.error_handler import (
    AppIdExhaustedError, ErrorHandler, is_frame_detached, retry_with_backoff,
)


def test_frame_detached_detection():
    assert is_frame_detached(Exception("page.goto: Frame has been detached."))
    assert not is_frame_detached(Exception("Timeout 20000ms exceeded."))


def test_exhausted_error_message():
    error = AppIdExhaustedError(50)
    assert error.attempts == 50
    assert "50 attempts" in str(error)


def test_retry_with_backoff_retries_then_succeeds(monkeypatch):
    sleeps = []
    monkeypatch.setattr(eh.time, "sleep", sleeps.append)
    calls = MagicMock(side_effect=[ValueError("boom"), ValueError("boom"), "ok"])

    @retry_with_backoff(max_retries=3, initial_delay=1.0, backoff_factor=2.0, exceptions=(ValueError,))
    def flaky():
        return calls()

    assert flaky() == "ok"
    assert sleeps == [1.0, 2.0]


def test_retry_with_backoff_reraises_after_last_attempt(monkeypatch):
    monkeypatch.setattr(eh.time, "sleep", lambda _: None)
    calls = MagicMock(side_effect=ValueError("boom"))

    @retry_with_backoff(max_retries=2, exceptions=(ValueError,))
    def always_fails():
        return calls()

    with pytest.raises(ValueError):
        always_fails()
    assert calls.call_count == 3


def test_retry_does_not_catch_other_exceptions(monkeypatch):
    monkeypatch.setattr(eh.time, "sleep", lambda _: None)
    calls = MagicMock(side_effect=KeyError("x"))

    @retry_with_backoff(max_retries=3, exceptions=(ValueError,))
    def wrong_error():
        return calls()

    with pytest.raises(KeyError):
        wrong_error()
    assert calls.call_count == 1


def test_error_handler_writes_error_log(tmp_path):
    handler = ErrorHandler(str(tmp_path), handle_signals=False)
    try:
        raise RuntimeError("dropdown missing")
    except RuntimeError as e:
        handler.log_error("STEP_FAILED", "Could not pick plan", e)

    for log_handler in handler.logger.handlers:
        log_handler.flush()
    content = handler.log_file.read_text(encoding="utf-8")
    assert "[STEP_FAILED] Could not pick plan" in content
    assert "dropdown missing" in content
    assert (tmp_path / "screenshots").is_dir()


def test_screenshot_skipped_without_page(tmp_path):
    handler = ErrorHandler(str(tmp_path), handle_signals=False)
    assert handler.capture_screenshot(None) is None


def test_screenshot_saved_for_open_page(tmp_path):
    handler = ErrorHandler(str(tmp_path), handle_signals=False)
    page = MagicMock()
    page.is_closed.return_value = False

    path = handler.capture_screenshot(page, "STEP")

    assert path.startswith(str(tmp_path / "screenshots" / "error_STEP_"))
    page.screenshot.assert_called_once_with(path=path, full_page=True)
