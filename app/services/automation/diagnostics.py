"""Snapshot capture for post-mortem diagnosis of order sessions."""
import base64
import logging
from typing import Optional, Protocol, Sequence
from playwright.async_api import Page

from app.core.config import Settings
from app.services.automation.constants import SNAPSHOT_ERROR
from app.services.ordering.models import OrderResult, SnapshotRecord

logger = logging.getLogger(__name__)


class PageSource(Protocol):
    """Anything that can list its open pages, oldest first."""

    @property
    def pages(self) -> Sequence[Page]: ...


class DiagnosticsRecorder:
    """Appends full-page screenshots to an order result. Never raises."""

    def __init__(self, settings: Settings):
        self.enabled = settings.screenshot_on_error
        self.html_limit = settings.error_html_limit

    async def capture(
        self, page: Optional[Page], label: str, result: OrderResult
    ) -> Optional[SnapshotRecord]:
        """Capture a snapshot of the page tagged with a stage label."""
        if not self.enabled or page is None:
            return None
        try:
            image = await page.screenshot(full_page=True)
        except Exception as e:
            logger.warning(f"[DIAGNOSTICS] Could not take screenshot {label}: {e}")
            return None
        snapshot = SnapshotRecord(label=label, image=base64.b64encode(image).decode("ascii"))
        result.add_snapshot(snapshot)
        logger.debug(f"[DIAGNOSTICS] Captured {label}")
        return snapshot

    async def capture_failure(self, source: Optional[PageSource], result: OrderResult) -> None:
        """Capture the last active page and its truncated HTML after an abort."""
        if not self.enabled or source is None:
            return
        try:
            pages = list(source.pages)
        except Exception as e:
            logger.warning(f"[DIAGNOSTICS] Could not list open pages: {e}")
            return
        if not pages:
            return
        page = pages[-1]
        await self.capture(page, SNAPSHOT_ERROR, result)
        try:
            html = await page.content()
            result.error_page_html = html[: self.html_limit]
        except Exception as e:
            logger.warning(f"[DIAGNOSTICS] Could not read error page HTML: {e}")
