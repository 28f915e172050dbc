"""Submits the order and scrapes the confirmation page."""
import logging
import re
from typing import List, NamedTuple, Optional
from pydantic import BaseModel
from playwright.async_api import Error as PlaywrightError, Page

from app.core.config import Settings
from app.services.automation.constants import (
    CONFIRMATION_MARKERS,
    DEFAULT_PICKUP_ESTIMATE,
    ORDER_NUMBER_SENTINEL,
    PLACE_ORDER_LABEL,
)
from app.services.automation.errors import ElementNotFound, OrderSubmissionFailed
from app.services.automation.locator import BUTTON_STRATEGIES, ElementLocator
from app.services.automation.waits import wait_for_text
from app.services.ordering.models import OrderResult

logger = logging.getLogger(__name__)


class ExtractionRule(NamedTuple):
    """Regex whose first group, formatted by the template, is the field value."""

    pattern: "re.Pattern[str]"
    template: str = "{}"

    def apply(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if not match:
            return None
        return self.template.format(match.group(1).strip())


ORDER_NUMBER_RULES: List[ExtractionRule] = [
    ExtractionRule(re.compile(r"Order\s+Number\s*[:#]?\s*([A-Za-z0-9\-]*\d[A-Za-z0-9\-]*)", re.I)),
    ExtractionRule(re.compile(r"Order\s*(?:#|No\.?)\s*:?\s*([A-Za-z0-9\-]*\d[A-Za-z0-9\-]*)", re.I)),
    ExtractionRule(re.compile(r"#([A-Za-z0-9]*\d[A-Za-z0-9]*)")),
]

PICKUP_TIME_RULES: List[ExtractionRule] = [
    ExtractionRule(re.compile(r"Approximately\s+(\d+(?:\s*[-–]\s*\d+)?\s*minutes?)", re.I)),
    ExtractionRule(re.compile(r"(\d+(?:\s*[-–]\s*\d+)?\s*minutes?)", re.I)),
    ExtractionRule(re.compile(r"(\d{1,2}:\d{2}\s*[AP]M)", re.I)),
]

TOTAL_AMOUNT_RULES: List[ExtractionRule] = [
    ExtractionRule(re.compile(r"\bTotal[:\s]+\$?(\d[\d,]*(?:\.\d{1,2})?)", re.I), "${}"),
    ExtractionRule(re.compile(r"\$(\d+\.\d{2})\s*$", re.M), "${}"),
]


class ConfirmationDetails(BaseModel):
    """Fields scraped from the confirmation page."""

    confirmation_number: str = ORDER_NUMBER_SENTINEL
    estimated_pickup_time: str = DEFAULT_PICKUP_ESTIMATE
    total_amount: Optional[str] = None


def first_match(rules: List[ExtractionRule], text: str) -> Optional[str]:
    """Get the value from the first rule that matches the text."""
    for rule in rules:
        value = rule.apply(text)
        if value:
            return value
    return None


def extract_confirmation_details(page_text: str) -> ConfirmationDetails:
    """
    Pull order number, pickup estimate and total out of confirmation text.

    Each field is independent; a field with no matching rule gets its
    placeholder (the total has none and stays None).
    """
    text = page_text or ""
    details = ConfirmationDetails()
    order_number = first_match(ORDER_NUMBER_RULES, text)
    if order_number:
        details.confirmation_number = order_number
    pickup_time = first_match(PICKUP_TIME_RULES, text)
    if pickup_time:
        details.estimated_pickup_time = pickup_time
    details.total_amount = first_match(TOTAL_AMOUNT_RULES, text)
    return details


class OrderFinalizer:
    """Places the order and fills in the confirmation fields of the result."""

    def __init__(self, settings: Settings, locator: Optional[ElementLocator] = None):
        self.settings = settings
        self.locator = locator or ElementLocator()

    async def submit(self, page: Page) -> None:
        """
        Click "Place Order" and wait for the confirmation page.

        Raises:
            OrderSubmissionFailed: If the button is missing or no confirmation shows up
        """
        try:
            await self.locator.activate(page, PLACE_ORDER_LABEL, BUTTON_STRATEGIES)
        except ElementNotFound as e:
            raise OrderSubmissionFailed("Place Order button not found", cause=e) from e

        timeout_ms = self.settings.order_submit_timeout_ms
        try:
            confirmed = await wait_for_text(page, CONFIRMATION_MARKERS, timeout_ms)
        except PlaywrightError as e:
            # The order may already be placed at this point
            raise OrderSubmissionFailed(
                f"Page failed while waiting for order confirmation: {e}", cause=e
            ) from e
        if not confirmed:
            raise OrderSubmissionFailed(
                f"No order confirmation within {timeout_ms}ms"
            )
        logger.info("[FINALIZER] Order confirmation page reached")

    async def extract(self, page: Page, result: OrderResult) -> ConfirmationDetails:
        """Scrape the confirmation page into the result. Never raises."""
        try:
            page_text = await page.inner_text("body")
        except PlaywrightError as e:
            logger.warning(f"[FINALIZER] Could not read confirmation page: {e}")
            page_text = ""

        details = extract_confirmation_details(page_text)
        result.confirmation_number = details.confirmation_number
        result.estimated_pickup_time = details.estimated_pickup_time
        result.total_amount = details.total_amount

        logger.info(f"[FINALIZER] Order Number: {details.confirmation_number}")
        logger.info(f"[FINALIZER] Pickup Time: {details.estimated_pickup_time}")
        logger.info(f"[FINALIZER] Total: {details.total_amount or 'Not extracted'}")
        return details
