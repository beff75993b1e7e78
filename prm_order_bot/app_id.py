"""
App ID acquisition on the SSS application tab.

The SSS system is the only authority on which App IDs are taken: each
candidate is typed into the App ID field and checked with the "duplicate"
button, and the page text tells us whether it can be used.
"""

import random
from typing import Optional

from . import config
from .error_handler import AppIdExhaustedError

ACCEPTED = "accepted"
DUPLICATE = "duplicate"
UNKNOWN = "unknown"


def random_app_id(rng: Optional[random.Random] = None) -> str:
    """Uniformly random 7-digit candidate"""
    return str((rng or random).randint(config.APP_ID_MIN, config.APP_ID_MAX))


def classify_response(body_text: str) -> str:
    if config.APP_ID_ACCEPTED_TEXT in body_text:
        return ACCEPTED
    if config.APP_ID_DUPLICATE_TEXT in body_text:
        return DUPLICATE
    return UNKNOWN


def check_app_id(page, app_id: str, settle_ms: int = config.APP_ID_SETTLE_MS) -> str:
    """Submit one candidate to the duplicate check and classify the page response"""
    page.fill(config.APP_ID_INPUT, app_id)
    page.click(config.APP_ID_CHECK_BUTTON)
    page.wait_for_timeout(settle_ms)
    return classify_response(page.locator("body").inner_text())


def acquire_app_id(
    page,
    max_attempts: int = config.APP_ID_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
    settle_ms: int = config.APP_ID_SETTLE_MS,
) -> str:
    """
    Propose random App IDs until the SSS system accepts one.

    Duplicates and unrecognized responses both lead to a new candidate.
    Raises AppIdExhaustedError once max_attempts probes were made without
    an acceptance.
    """
    max_attempts = max(1, max_attempts)
    for attempt in range(1, max_attempts + 1):
        app_id = random_app_id(rng)
        print(f"🔄 Trying App ID: {app_id} ({attempt}/{max_attempts})")

        result = check_app_id(page, app_id, settle_ms)
        if result == ACCEPTED:
            print(f"✓ App ID accepted: {app_id}")
            return app_id
        if result == DUPLICATE:
            print("  ⚠️  App ID duplicated, retrying...")
        else:
            print("  ⚠️  Unexpected response, retrying...")

    raise AppIdExhaustedError(max_attempts)
