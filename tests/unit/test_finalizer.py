"""Unit tests for order submission and confirmation extraction."""
import pytest
from unittest.mock import AsyncMock, Mock
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from app.services.automation.constants import (
    DEFAULT_PICKUP_ESTIMATE,
    ORDER_NUMBER_SENTINEL,
    PLACE_ORDER_LABEL,
)
from app.services.automation.errors import ElementNotFound, OrderSubmissionFailed
from app.services.automation.finalizer import (
    OrderFinalizer,
    extract_confirmation_details,
)
from app.services.automation.locator import ElementLocator
from app.services.ordering.models import OrderResult


@pytest.fixture
def locator():
    mock = Mock(spec=ElementLocator)
    mock.activate = AsyncMock(return_value="exact_text")
    return mock


@pytest.fixture
def finalizer(test_settings, locator):
    return OrderFinalizer(test_settings, locator)


class TestExtraction:
    """Test scraping fields from confirmation text."""

    def test_all_fields_extracted(self):
        details = extract_confirmation_details(
            "Order Placed! Order Number: A-1042\n"
            "Your order will be ready in approximately 20-30 minutes\n"
            "Subtotal: $16.00\nTotal: $18.08"
        )

        assert details.confirmation_number == "A-1042"
        assert details.estimated_pickup_time == "20-30 minutes"
        assert details.total_amount == "$18.08"

    def test_order_hash_number(self):
        details = extract_confirmation_details("Order Confirmed. Order #58213")

        assert details.confirmation_number == "58213"

    def test_bare_hash_reference(self):
        details = extract_confirmation_details("Thanks! Reference #X4Z99K")

        assert details.confirmation_number == "X4Z99K"

    def test_order_placed_heading_is_not_an_order_number(self):
        """Test that the confirmation heading alone yields the sentinel."""
        details = extract_confirmation_details("Order Placed\nThank You For Ordering")

        assert details.confirmation_number == ORDER_NUMBER_SENTINEL

    def test_clock_time_pickup(self):
        details = extract_confirmation_details("Order Placed. Pickup at 6:45 PM")

        assert details.estimated_pickup_time == "6:45 PM"

    def test_pickup_time_defaults_when_missing(self):
        """Test that a missing estimate falls back to the default, never None."""
        details = extract_confirmation_details("Order Placed")

        assert details.estimated_pickup_time == DEFAULT_PICKUP_ESTIMATE

    def test_subtotal_not_mistaken_for_total(self):
        details = extract_confirmation_details("Subtotal: $16.00\nTax: $2.08\nTotal: $18.08")

        assert details.total_amount == "$18.08"

    def test_trailing_amount_fallback(self):
        details = extract_confirmation_details("Angus Burger x2\n$31.50")

        assert details.total_amount == "$31.50"

    def test_total_has_no_default(self):
        details = extract_confirmation_details("Order Placed")

        assert details.total_amount is None

    def test_empty_text(self):
        details = extract_confirmation_details("")

        assert details.confirmation_number == ORDER_NUMBER_SENTINEL
        assert details.estimated_pickup_time == DEFAULT_PICKUP_ESTIMATE


class TestSubmit:
    """Test placing the order."""

    @pytest.mark.asyncio
    async def test_submit_waits_for_confirmation(self, finalizer, locator, mock_page):
        await finalizer.submit(mock_page)

        assert locator.activate.await_args.args[1] == PLACE_ORDER_LABEL
        mock_page.wait_for_function.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_place_order_button(self, finalizer, locator, mock_page):
        locator.activate.side_effect = ElementNotFound(PLACE_ORDER_LABEL)

        with pytest.raises(OrderSubmissionFailed) as exc_info:
            await finalizer.submit(mock_page)

        assert isinstance(exc_info.value.root_cause, ElementNotFound)
        mock_page.wait_for_function.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_confirmation_timeout(self, finalizer, mock_page):
        mock_page.wait_for_function.side_effect = PlaywrightTimeoutError("Timeout 100ms exceeded.")

        with pytest.raises(OrderSubmissionFailed):
            await finalizer.submit(mock_page)

    @pytest.mark.asyncio
    async def test_page_failure_during_confirmation_wait(self, finalizer, mock_page):
        """Test that a page closing after Place Order is still a submission failure."""
        closed = PlaywrightError("Target page, context or browser has been closed")
        mock_page.wait_for_function.side_effect = closed

        with pytest.raises(OrderSubmissionFailed) as exc_info:
            await finalizer.submit(mock_page)

        assert exc_info.value.root_cause is closed
        assert "has been closed" in str(exc_info.value)


class TestExtract:
    """Test writing confirmation details into the result."""

    @pytest.mark.asyncio
    async def test_extract_fills_result(self, finalizer, mock_page):
        mock_page.inner_text.return_value = "Order Number: 77 Ready in 15 minutes Total: $9.99"
        result = OrderResult()

        await finalizer.extract(mock_page, result)

        assert result.confirmation_number == "77"
        assert result.estimated_pickup_time == "15 minutes"
        assert result.total_amount == "$9.99"

    @pytest.mark.asyncio
    async def test_unreadable_page_uses_placeholders(self, finalizer, mock_page):
        """Test that extraction problems never raise."""
        mock_page.inner_text.side_effect = PlaywrightError("Target closed")
        result = OrderResult()

        await finalizer.extract(mock_page, result)

        assert result.confirmation_number == ORDER_NUMBER_SENTINEL
        assert result.estimated_pickup_time == DEFAULT_PICKUP_ESTIMATE
