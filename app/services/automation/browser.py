"""Chromium session lifecycle for one order."""
import logging
from typing import List, Optional
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from app.core.config import Settings
from app.services.automation.constants import (
    BROWSER_LAUNCH_ARGS,
    BROWSER_USER_AGENT,
    BROWSER_VIEWPORT,
)

logger = logging.getLogger(__name__)


class BrowserSession:
    """Owns the Playwright driver, browser and context used by a single order."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def start(self) -> Page:
        """Launch Chromium and open the page the order will be driven on."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.settings.headless,
            args=BROWSER_LAUNCH_ARGS,
        )
        self._context = await self._browser.new_context(
            viewport=BROWSER_VIEWPORT,
            user_agent=BROWSER_USER_AGENT,
        )
        page = await self._context.new_page()
        logger.info(f"[BROWSER] Chromium started (headless={self.settings.headless})")
        return page

    @property
    def pages(self) -> List[Page]:
        """Get the open pages, most recently opened last."""
        if self._context is None:
            return []
        return list(self._context.pages)

    async def close(self) -> None:
        """Tear everything down, whatever state the session is in."""
        for resource in (self._context, self._browser):
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception as e:
                logger.warning(f"[BROWSER] Error while closing {type(resource).__name__}: {e}")
        try:
            if self._playwright:
                await self._playwright.stop()
        finally:
            self._playwright = self._browser = self._context = None
            logger.info("[BROWSER] Session closed")

    async def __aenter__(self) -> "BrowserSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
