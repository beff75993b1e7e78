"""Tests for browser session handling without a real browser."""

from unittest.mock import MagicMock

import pytest
import requests
from playwright.sync_api import Error as PlaywrightError

from prm_order_bot import browser_session as bs
from prm_order_bot import error_handler as eh
from prm_order_bot.browser_session import BrowserSession


@pytest.fixture
def session(tmp_path):
    return BrowserSession(MagicMock(), user_data_dir=str(tmp_path / "UserData"), channel="msedge", cdp_port=9333)


def test_cdp_ready_when_endpoint_answers(session, monkeypatch):
    get = MagicMock(return_value=MagicMock(status_code=200))
    monkeypatch.setattr(bs.requests, "get", get)

    assert session.wait_for_cdp_ready(timeout=3)
    get.assert_called_once_with("http://localhost:9333/json/version", timeout=2)


def test_cdp_not_ready_after_timeout(session, monkeypatch):
    monkeypatch.setattr(bs.requests, "get", MagicMock(side_effect=requests.ConnectionError()))
    monkeypatch.setattr(bs.time, "sleep", lambda _: None)

    assert not session.wait_for_cdp_ready(timeout=3)


def test_connect_fails_without_debugging_browser(session, monkeypatch):
    monkeypatch.setattr(session, "wait_for_cdp_ready", lambda: False)

    with pytest.raises(ConnectionError):
        session.connect()


def test_start_debug_browser_requires_path(session):
    with pytest.raises(ValueError):
        session.start_debug_browser(executable="")


def test_launch_falls_back_to_fresh_browser(session):
    playwright = MagicMock()
    playwright.chromium.launch_persistent_context.side_effect = PlaywrightError("profile locked")
    session.playwright = playwright

    context = session.launch()

    assert context is playwright.chromium.launch.return_value.new_context.return_value
    playwright.chromium.launch.assert_called_once_with(headless=False, channel="msedge")
    assert not session.user_data_dir.exists()


def test_first_page_opens_a_tab_when_none_is_usable(session):
    session.context = MagicMock()
    session.context.pages = []

    assert session.first_page() is session.context.new_page.return_value


def test_latest_page_is_last_tab(session):
    session.context = MagicMock()
    session.context.pages = ["prm", "sss"]

    assert session.latest_page() == "sss"


def test_close_only_disconnects_connected_browser(session):
    context, browser, playwright = MagicMock(), MagicMock(), MagicMock()
    session.context, session.browser, session.playwright = context, browser, playwright
    session._connected = True

    session.close()

    context.close.assert_not_called()
    browser.close.assert_called_once()
    playwright.stop.assert_called_once()
    assert session.browser is None


def test_close_never_raises(session):
    session.context = MagicMock()
    session.context.close.side_effect = RuntimeError("already closed")
    session.playwright = MagicMock()

    session.close()

    session.error_handler.log_error.assert_called()


def test_launch_uses_persistent_profile(session):
    playwright = MagicMock()
    session.playwright = playwright

    context = session.launch()

    assert context is playwright.chromium.launch_persistent_context.return_value
    playwright.chromium.launch_persistent_context.assert_called_once_with(
        str(session.user_data_dir), headless=False, channel="msedge"
    )
    playwright.chromium.launch.assert_not_called()
    assert session.user_data_dir.is_dir()


@pytest.fixture
def cdp_ready(session, monkeypatch):
    monkeypatch.setattr(session, "wait_for_cdp_ready", lambda: True)
    session.playwright = MagicMock()
    return session.playwright.chromium


def test_connect_reuses_existing_context(session, cdp_ready):
    browser = cdp_ready.connect_over_cdp.return_value
    existing = MagicMock()
    browser.contexts = [existing, MagicMock()]

    assert session.connect() is existing
    cdp_ready.connect_over_cdp.assert_called_once_with("http://localhost:9333")
    browser.new_context.assert_not_called()
    assert session._connected


def test_connect_opens_context_when_browser_has_none(session, cdp_ready):
    browser = cdp_ready.connect_over_cdp.return_value
    browser.contexts = []

    assert session.connect() is browser.new_context.return_value
    assert session.browser is browser


def test_connect_retries_after_playwright_error(session, cdp_ready, monkeypatch):
    sleeps = []
    monkeypatch.setattr(eh.time, "sleep", sleeps.append)
    browser = MagicMock(contexts=[MagicMock()])
    cdp_ready.connect_over_cdp.side_effect = [PlaywrightError("connect ECONNREFUSED"), browser]

    session.connect()

    assert cdp_ready.connect_over_cdp.call_count == 2
    assert sleeps == [2.0]
    assert session.browser is browser


def test_connect_can_start_debug_browser(session, cdp_ready, monkeypatch):
    start = MagicMock()
    monkeypatch.setattr(session, "start_debug_browser", start)
    cdp_ready.connect_over_cdp.return_value.contexts = [MagicMock()]

    session.connect(launch_browser=True)

    start.assert_called_once_with()


def test_start_debug_browser_listens_on_cdp_port(session, monkeypatch):
    popen = MagicMock()
    monkeypatch.setattr(bs.subprocess, "Popen", popen)

    session.start_debug_browser(executable="msedge.exe")

    command = popen.call_args.args[0]
    assert command[0] == "msedge.exe"
    assert "--remote-debugging-port=9333" in command
    assert session.browser_process is popen.return_value

def test_close_reaps_exited_debug_browser(session):
    session.browser_process = MagicMock()
    session.browser_process.poll.return_value = 0

    session.close()

    assert session.browser_process is None


def test_close_leaves_running_debug_browser(session):
    process = MagicMock()
    process.poll.return_value = None
    session.browser_process = process

    session.close()

    process.terminate.assert_not_called()
    assert session.browser_process is process
