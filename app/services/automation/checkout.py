"""Drives the session from a filled cart to a ready-to-submit checkout page."""
import logging
import re
from typing import List, Optional, Tuple
from playwright.async_api import Error as PlaywrightError, Page

from app.core.config import Settings
from app.services.automation.constants import (
    CASH_PAYMENT_KEYWORDS,
    CHECKOUT_LABEL,
    CHECKOUT_PAGE_MARKERS,
    GUEST_CHECKOUT_LABEL,
    GUEST_FIELDS,
    PAYMENT_RADIO_STATE_SCRIPT,
    PICKUP_NOTES_SELECTOR,
    PLACEHOLDER_SELECTOR,
    SELECT_PAYMENT_RADIO_SCRIPT,
)
from app.services.automation.errors import (
    AutomationFailure,
    RequiredFieldMissing,
    StateTransitionFailed,
    StateTransitionTimeout,
)
from app.services.automation.locator import (
    BUTTON_STRATEGIES,
    ENABLED_BUTTON_STRATEGIES,
    ElementLocator,
)
from app.services.automation.stages import CheckoutStage
from app.services.automation.waits import settle, wait_for_text

logger = logging.getLogger(__name__)

NON_DIGIT_PATTERN = re.compile(r"\D")


def derive_first_name(customer_name: str) -> str:
    """Get the first whitespace-delimited token of a customer name."""
    tokens = (customer_name or "").split()
    return tokens[0] if tokens else ""


def normalize_phone(customer_phone: str) -> str:
    """Strip every non-digit character from a phone number."""
    return NON_DIGIT_PATTERN.sub("", customer_phone or "")


class CheckoutFlowDriver:
    """
    Linear checkout state machine.

    Each transition clicks or fills something, waits for the page to settle
    and records the new stage. The first unrecoverable failure ends the flow.
    """

    def __init__(self, settings: Settings, locator: Optional[ElementLocator] = None):
        self.settings = settings
        self.locator = locator or ElementLocator()
        self.stage = CheckoutStage.STARTED

    def advance(self, new_stage: CheckoutStage) -> None:
        """Record a forward transition."""
        if new_stage.position <= self.stage.position:
            raise AutomationFailure(
                f"Illegal checkout transition: {self.stage.value} -> {new_stage.value}"
            )
        old_stage = self.stage
        self.stage = new_stage
        logger.info(
            f"[STAGE TRANSITION] Stage changed: {old_stage.value} -> {new_stage.value}"
        )

    async def initiate_checkout(self, page: Page) -> None:
        """Open the checkout modal from the cart."""
        await settle(page, self.settings.short_wait_ms)
        await self.locator.activate(page, CHECKOUT_LABEL, BUTTON_STRATEGIES)
        await settle(page, self.settings.default_wait_ms)
        self.advance(CheckoutStage.CHECKOUT_INITIATED)

    async def select_guest(self, page: Page) -> None:
        """Choose guest checkout in the checkout modal."""
        await settle(page, self.settings.short_wait_ms)
        await self.locator.activate(page, GUEST_CHECKOUT_LABEL, BUTTON_STRATEGIES)
        await settle(page, self.settings.default_wait_ms)
        self.advance(CheckoutStage.GUEST_SELECTED)

    def guest_field_values(
        self, customer_name: str, customer_phone: str
    ) -> List[Tuple[str, str, str]]:
        """
        Get (field name, placeholder fragment, value) for each guest field, in fill order.

        The last name is always the configured bot tag so automated orders
        stand out in the restaurant's records.
        """
        values = {
            "First name": derive_first_name(customer_name),
            "Last name": self.settings.bot_last_name,
            "Email": self.settings.bot_email,
            "Phone": normalize_phone(customer_phone),
        }
        return [
            (field_name, placeholder, values[field_name])
            for field_name, placeholder in GUEST_FIELDS
        ]

    async def fill_guest_info(
        self, page: Page, customer_name: str, customer_phone: str
    ) -> None:
        """
        Fill the guest form fields in order.

        Raises:
            RequiredFieldMissing: For the first field the page does not offer
        """
        fields = self.guest_field_values(customer_name, customer_phone)
        for field_name, placeholder, value in fields:
            selector = PLACEHOLDER_SELECTOR.format(placeholder=placeholder)
            field = await page.query_selector(selector)
            if field is None:
                raise RequiredFieldMissing(field_name)
            await field.click()
            await field.type(value, delay=self.settings.keystroke_delay_ms)

        first_name, last_name, _, phone = (value for _, _, value in fields)
        logger.info(f"[CHECKOUT] Filled guest info: {first_name} {last_name}, {phone}")
        self.advance(CheckoutStage.GUEST_INFO_FILLED)

    async def submit_guest_form(self, page: Page) -> None:
        """
        Submit the guest form and wait for the final checkout page.

        Raises:
            StateTransitionTimeout: If the checkout page never shows up
            StateTransitionFailed: If the page breaks while waiting for it
        """
        await settle(page, self.settings.short_wait_ms)
        await self.locator.activate(page, GUEST_CHECKOUT_LABEL, ENABLED_BUTTON_STRATEGIES)
        await settle(page, self.settings.default_wait_ms)

        timeout_ms = self.settings.guest_submit_timeout_ms
        try:
            reached = await wait_for_text(page, CHECKOUT_PAGE_MARKERS, timeout_ms)
        except PlaywrightError as e:
            raise StateTransitionFailed(
                CheckoutStage.GUEST_FORM_SUBMITTED.value,
                f"Page failed while waiting for the checkout page: {e}",
                cause=e,
            ) from e
        if not reached:
            raise StateTransitionTimeout(
                CheckoutStage.GUEST_FORM_SUBMITTED.value, CHECKOUT_PAGE_MARKERS, timeout_ms
            )
        self.advance(CheckoutStage.GUEST_FORM_SUBMITTED)

    async def add_special_instructions(self, page: Page, instructions: str) -> bool:
        """
        Type special instructions into the pickup notes field, if the page has one.

        Returns:
            True if the instructions were entered
        """
        if not instructions or not instructions.strip():
            return False
        try:
            notes_field = await page.query_selector(PICKUP_NOTES_SELECTOR)
            if notes_field is None:
                logger.info("[CHECKOUT] Pickup notes field not found, skipping")
                return False
            await notes_field.click()
            await notes_field.type(instructions, delay=self.settings.keystroke_delay_ms)
        except PlaywrightError as e:
            logger.warning(f"[CHECKOUT] Could not add pickup notes: {e}")
            return False
        logger.info(f"[CHECKOUT] Added pickup notes: {instructions}")
        self.advance(CheckoutStage.NOTES_ADDED)
        return True

    async def verify_payment_method(self, page: Page) -> bool:
        """
        Make sure "Cash - Pay at restaurant" is the selected payment option.

        The site normally preselects it, so nothing here aborts the order.

        Returns:
            True if the cash option is known to be selected
        """
        selected = False
        try:
            state = await page.evaluate(PAYMENT_RADIO_STATE_SCRIPT, CASH_PAYMENT_KEYWORDS)
            if state.get("checked"):
                logger.info("[CHECKOUT] Payment method: Cash - Pay at restaurant")
                selected = True
            elif not state.get("found"):
                logger.warning("[CHECKOUT] Cash payment option not found")
            else:
                logger.warning("[CHECKOUT] Cash payment not selected, attempting to select")
                selected = bool(
                    await page.evaluate(SELECT_PAYMENT_RADIO_SCRIPT, CASH_PAYMENT_KEYWORDS)
                )
                await settle(page, self.settings.short_wait_ms)
        except (PlaywrightError, AttributeError) as e:
            logger.warning(f"[CHECKOUT] Could not verify payment method: {e}")
        self.advance(CheckoutStage.PAYMENT_VERIFIED)
        return selected

    def mark_ready(self) -> None:
        """Record that the order can be submitted."""
        self.advance(CheckoutStage.READY_TO_SUBMIT)
