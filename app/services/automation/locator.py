"""Resolve human-readable labels to clickable page elements."""
import logging
from typing import Awaitable, Callable, List, NamedTuple, Optional, Sequence
from playwright.async_api import ElementHandle, Page

from app.services.automation.constants import (
    BUTTON_TAGS,
    CONTAINS_TEXT_SCRIPT,
    CONTAINS_TEXT_TAGS,
    EXACT_TEXT_SCRIPT,
    EXACT_TEXT_TAGS,
)
from app.services.automation.errors import ElementNotFound

logger = logging.getLogger(__name__)

FindElement = Callable[[Page, str], Awaitable[Optional[ElementHandle]]]


class LocatorStrategy(NamedTuple):
    """A named way of turning a label into an element."""

    name: str
    find: FindElement


def exact_text(tags: Sequence[str] = EXACT_TEXT_TAGS) -> LocatorStrategy:
    """Match elements whose whole text equals the label, ignoring case."""
    tag_list = list(tags)

    async def find(page: Page, label: str) -> Optional[ElementHandle]:
        handle = await page.evaluate_handle(
            EXACT_TEXT_SCRIPT, {"label": label, "tags": tag_list}
        )
        return handle.as_element()

    return LocatorStrategy(f"exact_text({','.join(tag_list)})", find)


def contains_text(
    tags: Sequence[str] = CONTAINS_TEXT_TAGS, enabled_only: bool = False
) -> LocatorStrategy:
    """Match the innermost element whose text contains the label, ignoring case."""
    tag_list = list(tags)

    async def find(page: Page, label: str) -> Optional[ElementHandle]:
        handle = await page.evaluate_handle(
            CONTAINS_TEXT_SCRIPT,
            {"label": label, "tags": tag_list, "enabledOnly": enabled_only},
        )
        return handle.as_element()

    suffix = ",enabled" if enabled_only else ""
    return LocatorStrategy(f"contains_text({','.join(tag_list)}{suffix})", find)


def xpath_literal(value: str) -> str:
    """Quote a string for use inside an XPath expression."""
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


def xpath_text_contains(value: str) -> str:
    """Build the case-insensitive "text contains" XPath query for a label."""
    upper = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    lower = upper.lower()
    return (
        f"//*[contains(translate(text(), '{upper}', '{lower}'), "
        f"{xpath_literal(value.lower())})]"
    )


def xpath_contains() -> LocatorStrategy:
    """Match any element whose own text node contains the label."""

    async def find(page: Page, label: str) -> Optional[ElementHandle]:
        return await page.query_selector(f"xpath={xpath_text_contains(label)}")

    return LocatorStrategy("xpath_contains", find)


# Menu items: no stable identifiers, so fall back from precise to loose matches
ITEM_STRATEGIES: List[LocatorStrategy] = [exact_text(), contains_text(), xpath_contains()]
# Modal options and modifications
OPTION_STRATEGIES: List[LocatorStrategy] = [contains_text(BUTTON_TAGS)]
# Named buttons such as "Checkout"
BUTTON_STRATEGIES: List[LocatorStrategy] = [
    exact_text(BUTTON_TAGS),
    contains_text(BUTTON_TAGS),
]
ENABLED_BUTTON_STRATEGIES: List[LocatorStrategy] = [
    contains_text(BUTTON_TAGS, enabled_only=True),
]


class ElementLocator:
    """Tries an ordered list of strategies until one yields an element."""

    def __init__(self, strategies: Optional[Sequence[LocatorStrategy]] = None):
        self.strategies = list(strategies or ITEM_STRATEGIES)

    async def activate(
        self,
        page: Page,
        label: str,
        strategies: Optional[Sequence[LocatorStrategy]] = None,
    ) -> str:
        """
        Find and click the element for a label.

        Strategies run in order. One that raises, or whose element cannot be
        clicked, is treated as no match and the next one is tried. Nothing is
        tried after a successful click.

        Returns:
            Name of the strategy that produced the clicked element

        Raises:
            ElementNotFound: If no strategy produced a clickable element
        """
        for strategy in strategies or self.strategies:
            element = await self._attempt(strategy, page, label)
            if element is None:
                continue
            try:
                await element.click()
            except Exception as e:
                logger.debug(
                    f"[LOCATOR] Click on '{label}' from {strategy.name} failed: {e}"
                )
                continue
            logger.info(f"[LOCATOR] Clicked '{label}' via {strategy.name}")
            return strategy.name
        raise ElementNotFound(label)

    async def _attempt(
        self, strategy: LocatorStrategy, page: Page, label: str
    ) -> Optional[ElementHandle]:
        """Run one strategy, treating any exception as no match."""
        try:
            return await strategy.find(page, label)
        except Exception as e:
            logger.debug(f"[LOCATOR] Strategy {strategy.name} failed for '{label}': {e}")
            return None
