"""Settle delays and bounded waits on page state."""
import logging
from typing import Sequence
from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from app.services.automation.constants import PAGE_TEXT_CONTAINS_SCRIPT

logger = logging.getLogger(__name__)


async def settle(page: Page, wait_ms: int) -> None:
    """Pause for UI updates the site does not signal."""
    if wait_ms > 0:
        await page.wait_for_timeout(wait_ms)


async def page_text_contains(page: Page, markers: Sequence[str]) -> bool:
    """Check if the page text currently contains any of the markers."""
    return bool(await page.evaluate(PAGE_TEXT_CONTAINS_SCRIPT, list(markers)))


async def wait_for_text(page: Page, markers: Sequence[str], timeout_ms: int) -> bool:
    """
    Poll until the page text contains any of the markers.

    A non-positive timeout checks the page once instead of waiting.

    Returns:
        True once a marker appears, False if the timeout elapses first

    Raises:
        playwright.async_api.Error: If the page itself fails (closed, navigated away)
    """
    if timeout_ms <= 0:
        return await page_text_contains(page, markers)
    try:
        await page.wait_for_function(
            PAGE_TEXT_CONTAINS_SCRIPT, arg=list(markers), timeout=timeout_ms
        )
        return True
    except PlaywrightTimeoutError:
        logger.debug(f"[WAIT] None of {list(markers)} appeared within {timeout_ms}ms")
        return False
