"""Adds parsed line items to the site's cart, one customization modal at a time."""
import logging
from typing import List, Optional
from playwright.async_api import Error as PlaywrightError, Page

from app.core.config import Settings
from app.services.automation.constants import (
    ADD_TO_CART_LABEL,
    ADD_TO_CART_SELECTORS,
    CUSTOMIZATION_MARKERS,
    DEFAULT_OPTION_LABEL,
    INCREMENT_CONTROL_SCRIPT,
    REQUIRED_SELECTION_MARKERS,
)
from app.services.automation.errors import (
    AddToCartFailed,
    AutomationFailure,
    CartAdditionFailed,
    ElementNotFound,
)
from app.services.automation.locator import (
    BUTTON_STRATEGIES,
    ITEM_STRATEGIES,
    OPTION_STRATEGIES,
    ElementLocator,
)
from app.services.automation.waits import page_text_contains, settle, wait_for_text
from app.services.ordering.models import ParsedLineItem

logger = logging.getLogger(__name__)


class CartBuilder:
    """Adds items to the cart strictly in order, stopping at the first failure."""

    def __init__(self, settings: Settings, locator: Optional[ElementLocator] = None):
        self.settings = settings
        self.locator = locator or ElementLocator()

    async def add_items(self, page: Page, items: List[ParsedLineItem]) -> None:
        """
        Add every item to the cart.

        Raises:
            CartAdditionFailed: For the first item that could not be added;
                later items are never attempted
        """
        for index, item in enumerate(items, start=1):
            logger.info(f"[CART] Adding item {index}/{len(items)}: {item.raw_text}")
            try:
                await self.add_item(page, item)
            except AutomationFailure as e:
                raise CartAdditionFailed(item.canonical_name, e) from e
            except PlaywrightError as e:
                raise CartAdditionFailed(item.canonical_name, e) from e
            logger.info(f"[CART] Added {item.canonical_name} to cart")

    async def add_item(self, page: Page, item: ParsedLineItem) -> None:
        """Open an item's customization modal, customize it and confirm it."""
        await self.locator.activate(page, item.canonical_name, ITEM_STRATEGIES)

        # The modal shows its add control once it has rendered
        await wait_for_text(page, CUSTOMIZATION_MARKERS, self.settings.customization_timeout_ms)

        await self._select_required_defaults(page)
        await self._apply_modifications(page, item.modifications)
        if item.quantity > 1:
            await self._increment_quantity(page, item.quantity - 1)
        await self._confirm_add_to_cart(page, item)

        await settle(page, self.settings.default_wait_ms)

    async def _select_required_defaults(self, page: Page) -> None:
        """Pick the "regular" option when the modal demands a selection."""
        try:
            if not await page_text_contains(page, REQUIRED_SELECTION_MARKERS):
                return
            logger.info("[CART] Item has required selections, selecting defaults")
            await self.locator.activate(page, DEFAULT_OPTION_LABEL, OPTION_STRATEGIES)
            await settle(page, self.settings.short_wait_ms)
        except (AutomationFailure, PlaywrightError) as e:
            logger.warning(f"[CART] Could not select required option: {e}")

    async def _apply_modifications(self, page: Page, modifications: List[str]) -> None:
        """Click the modal control matching each modification, if there is one."""
        if not modifications:
            return
        logger.info(f"[CART] Applying modifications: {', '.join(modifications)}")
        for modification in modifications:
            try:
                await self.locator.activate(page, modification, OPTION_STRATEGIES)
                await settle(page, self.settings.short_wait_ms)
            except (AutomationFailure, PlaywrightError) as e:
                logger.warning(f"[CART] Could not apply modification '{modification}': {e}")

    async def _increment_quantity(self, page: Page, times: int) -> int:
        """
        Press the "+" control next to the quantity counter.

        Returns:
            Number of increments that went through
        """
        logger.info(f"[CART] Setting quantity to {times + 1}")
        done = 0
        for _ in range(times):
            try:
                handle = await page.evaluate_handle(INCREMENT_CONTROL_SCRIPT)
                control = handle.as_element()
                if control is None:
                    logger.warning("[CART] Quantity increment control not found")
                    break
                await control.click()
                await settle(page, self.settings.short_wait_ms)
                done += 1
            except PlaywrightError as e:
                logger.warning(f"[CART] Could not increase quantity: {e}")
                break
        return done

    async def _confirm_add_to_cart(self, page: Page, item: ParsedLineItem) -> None:
        """Click the modal's add control, falling back to structural selectors."""
        try:
            await self.locator.activate(page, ADD_TO_CART_LABEL, BUTTON_STRATEGIES)
            return
        except ElementNotFound:
            logger.info("[CART] Add to Cart text match failed, trying selectors")

        for selector in ADD_TO_CART_SELECTORS:
            try:
                await page.click(selector, timeout=self.settings.selector_click_timeout_ms)
                logger.info(f"[CART] Clicked add control via selector {selector}")
                return
            except PlaywrightError:
                continue

        raise AddToCartFailed(item.canonical_name)
