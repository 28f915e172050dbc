"""Unit tests for the element locator."""
import pytest
from unittest.mock import AsyncMock, Mock

from app.services.automation.constants import (
    CONTAINS_TEXT_SCRIPT,
    EXACT_TEXT_SCRIPT,
    EXACT_TEXT_TAGS,
)
from app.services.automation.errors import ElementNotFound
from app.services.automation.locator import (
    ITEM_STRATEGIES,
    ElementLocator,
    LocatorStrategy,
    contains_text,
    exact_text,
    xpath_contains,
    xpath_literal,
    xpath_text_contains,
)


def make_strategy(name, result=None, error=None):
    """Build a strategy whose find returns result or raises error."""
    find = AsyncMock(return_value=result, side_effect=error)
    return LocatorStrategy(name, find)


def make_element():
    element = Mock()
    element.click = AsyncMock()
    return element


class TestStrategyOrder:
    """Test that strategies run in priority order and short-circuit."""

    @pytest.mark.asyncio
    async def test_first_match_skips_remaining_strategies(self):
        """Test that later strategies are never attempted after a match."""
        element = make_element()
        first = make_strategy("first", result=element)
        second = make_strategy("second", result=make_element())
        third = make_strategy("third", result=make_element())
        locator = ElementLocator([first, second, third])

        used = await locator.activate(Mock(), "Bruschetta")

        assert used == "first"
        element.click.assert_awaited_once()
        second.find.assert_not_awaited()
        third.find.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_through_to_later_strategy(self):
        """Test that a later strategy is used when earlier ones find nothing."""
        element = make_element()
        first = make_strategy("first")
        second = make_strategy("second")
        third = make_strategy("third", result=element)
        locator = ElementLocator([first, second, third])

        used = await locator.activate(Mock(), "Bruschetta")

        assert used == "third"
        first.find.assert_awaited_once()
        second.find.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_strategy_exception_treated_as_no_match(self):
        """Test that an exception inside one strategy is swallowed."""
        element = make_element()
        broken = make_strategy("broken", error=RuntimeError("Execution context was destroyed"))
        working = make_strategy("working", result=element)
        locator = ElementLocator([broken, working])

        used = await locator.activate(Mock(), "Bruschetta")

        assert used == "working"
        element.click.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unclickable_element_falls_through(self):
        """Test that a failed click moves on to the next strategy."""
        stale = make_element()
        stale.click = AsyncMock(side_effect=RuntimeError("Element is not attached to the DOM"))
        good = make_element()
        locator = ElementLocator([make_strategy("stale", result=stale), make_strategy("good", result=good)])

        used = await locator.activate(Mock(), "Bruschetta")

        assert used == "good"
        good.click.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_all_strategies_exhausted_raises(self):
        """Test that ElementNotFound names the label when nothing matches."""
        locator = ElementLocator([make_strategy("a"), make_strategy("b", error=ValueError("boom"))])

        with pytest.raises(ElementNotFound) as exc_info:
            await locator.activate(Mock(), "Poutine")

        assert exc_info.value.label == "Poutine"
        assert "Poutine" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_per_call_strategies_override_defaults(self):
        """Test that strategies passed to a call replace the instance defaults."""
        default = make_strategy("default", result=make_element())
        override = make_strategy("override", result=make_element())
        locator = ElementLocator([default])

        used = await locator.activate(Mock(), "Checkout", [override])

        assert used == "override"
        default.find.assert_not_awaited()

    def test_default_item_strategies(self):
        """Test the item strategy chain: exact, containment, then XPath."""
        names = [strategy.name for strategy in ITEM_STRATEGIES]

        assert names[0].startswith("exact_text")
        assert names[1].startswith("contains_text")
        assert names[2] == "xpath_contains"


class TestStrategies:
    """Test the individual strategy builders."""

    @pytest.mark.asyncio
    async def test_exact_text_passes_label_and_tags(self, mock_page):
        """Test that exact_text evaluates its script with label and tag list."""
        element = make_element()
        mock_page.evaluate_handle.return_value.as_element.return_value = element

        found = await exact_text().find(mock_page, "Bruschetta")

        assert found is element
        mock_page.evaluate_handle.assert_awaited_once_with(
            EXACT_TEXT_SCRIPT, {"label": "Bruschetta", "tags": EXACT_TEXT_TAGS}
        )

    @pytest.mark.asyncio
    async def test_contains_text_enabled_only_flag(self, mock_page):
        """Test that contains_text forwards the enabled-only flag."""
        await contains_text(["button"], enabled_only=True).find(mock_page, "Continue as Guest")

        script, arg = mock_page.evaluate_handle.await_args.args
        assert script == CONTAINS_TEXT_SCRIPT
        assert arg == {"label": "Continue as Guest", "tags": ["button"], "enabledOnly": True}

    @pytest.mark.asyncio
    async def test_no_element_returns_none(self, mock_page):
        """Test that a null handle means no match."""
        assert await contains_text().find(mock_page, "Poutine") is None

    @pytest.mark.asyncio
    async def test_xpath_contains_queries_lowercased_label(self, mock_page):
        """Test that the XPath strategy lowercases the label."""
        await xpath_contains().find(mock_page, "Caesar Salad")

        selector = mock_page.query_selector.await_args.args[0]
        assert selector.startswith("xpath=//*[contains(translate(text()")
        assert "'caesar salad'" in selector


class TestXPathLiteral:
    """Test quoting of labels for XPath."""

    def test_plain_value(self):
        assert xpath_literal("wings") == "'wings'"

    def test_single_quote(self):
        assert xpath_literal("chef's special") == '"chef\'s special"'

    def test_both_quotes(self):
        literal = xpath_literal("chef's \"best\"")

        assert literal == "concat('chef', \"'\", 's \"best\"')"

    def test_query_shape(self):
        query = xpath_text_contains("Wings")

        assert query.endswith(", 'wings')]")
