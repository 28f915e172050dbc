"""Order placement pipeline: the single entry point into the automation engine."""
import logging
from typing import Callable, List, Optional, Protocol, Sequence
from playwright.async_api import Page

from app.core.config import Settings
from app.services.automation.browser import BrowserSession
from app.services.automation.cart import CartBuilder
from app.services.automation.checkout import CheckoutFlowDriver
from app.services.automation.constants import (
    SNAPSHOT_BEFORE_SUBMIT,
    SNAPSHOT_CART_FILLED,
    SNAPSHOT_CHECKOUT_MODAL,
    SNAPSHOT_CONFIRMATION,
    SNAPSHOT_FINAL_CHECKOUT,
    SNAPSHOT_GUEST_FORM,
    SNAPSHOT_GUEST_INFO_FILLED,
    SNAPSHOT_HOMEPAGE,
)
from app.services.automation.diagnostics import DiagnosticsRecorder
from app.services.automation.errors import AutomationFailure
from app.services.automation.finalizer import OrderFinalizer
from app.services.automation.locator import ElementLocator
from app.services.automation.stages import CheckoutStage
from app.services.automation.waits import settle
from app.services.ordering.models import OrderRequest, OrderResult, ParsedLineItem
from app.services.ordering.parser import OrderParser

logger = logging.getLogger(__name__)


class Session(Protocol):
    """Browser session as used by the pipeline."""

    async def start(self) -> Page: ...

    @property
    def pages(self) -> Sequence[Page]: ...

    async def close(self) -> None: ...


SessionFactory = Callable[[Settings], Session]


class OrderAutomationService:
    """Places one pickup order per call, each in its own browser session."""

    def __init__(
        self,
        settings: Settings,
        session_factory: Optional[SessionFactory] = None,
        parser: Optional[OrderParser] = None,
        locator: Optional[ElementLocator] = None,
    ):
        self.settings = settings
        self.session_factory = session_factory or BrowserSession
        self.parser = parser or OrderParser()
        self.locator = locator or ElementLocator()
        self.diagnostics = DiagnosticsRecorder(settings)
        self.cart = CartBuilder(settings, self.locator)
        self.finalizer = OrderFinalizer(settings, self.locator)

    async def place_order(self, request: OrderRequest) -> OrderResult:
        """
        Place a pickup order on the restaurant site.

        Never raises: any failure is reported through the returned result,
        together with a final snapshot of the page it happened on. The
        browser session is always torn down before returning.

        Args:
            request: What to order and who it is for

        Returns:
            OrderResult, with error populated exactly when success is False
        """
        result = OrderResult()
        checkout = CheckoutFlowDriver(self.settings, self.locator)
        session: Optional[Session] = None

        logger.info("=" * 80)
        logger.info(f"[PIPELINE] Starting order for {request.customer_name}")
        logger.info(f"[PIPELINE] Items: '{request.order_items}'")
        logger.info(f"[PIPELINE] Requested pickup: {request.pickup_time} (site computes its own)")
        logger.info("=" * 80)

        try:
            items = self.parser.parse(request.order_items)
            if not items:
                raise AutomationFailure("No order items could be parsed from the request")

            session = self.session_factory(self.settings)
            page = await session.start()
            await self._run(page, request, items, checkout, result)
            result.mark_succeeded()
            logger.info(
                f"[PIPELINE] Order placed successfully - "
                f"confirmation: {result.confirmation_number}, "
                f"pickup: {result.estimated_pickup_time}, total: {result.total_amount}"
            )
        except Exception as e:
            failure = e if isinstance(e, AutomationFailure) else AutomationFailure(
                f"Unexpected error during {checkout.stage.value}: {type(e).__name__}: {e}",
                cause=e,
            )
            root = failure.root_cause
            error_type = type(root if isinstance(root, AutomationFailure) else failure).__name__
            logger.error(
                f"[PIPELINE] Order failed at stage {checkout.stage.value} - "
                f"{error_type}: {failure}",
                exc_info=True,
            )
            result.mark_failed(str(failure), error_type, checkout.stage.value)
            await self.diagnostics.capture_failure(session, result)
        finally:
            if session is not None:
                try:
                    await session.close()
                except Exception as e:
                    logger.warning(f"[PIPELINE] Error tearing down browser session: {e}")

        return result

    async def _run(
        self,
        page: Page,
        request: OrderRequest,
        items: List[ParsedLineItem],
        checkout: CheckoutFlowDriver,
        result: OrderResult,
    ) -> None:
        """Drive every stage in order; any exception aborts the whole order."""
        logger.info("[PIPELINE] Step 1: Loading menu")
        await page.goto(
            self.settings.restaurant_url,
            wait_until="networkidle",
            timeout=self.settings.navigation_timeout_ms,
        )
        await settle(page, self.settings.default_wait_ms)
        checkout.advance(CheckoutStage.MENU_LOADED)
        await self.diagnostics.capture(page, SNAPSHOT_HOMEPAGE, result)

        logger.info(f"[PIPELINE] Step 2: Adding {len(items)} item(s) to cart")
        await self.cart.add_items(page, items)
        checkout.advance(CheckoutStage.CART_FILLED)
        await self.diagnostics.capture(page, SNAPSHOT_CART_FILLED, result)

        logger.info("[PIPELINE] Step 3: Going to checkout")
        await checkout.initiate_checkout(page)
        await self.diagnostics.capture(page, SNAPSHOT_CHECKOUT_MODAL, result)

        logger.info("[PIPELINE] Step 4: Selecting guest checkout")
        await checkout.select_guest(page)
        await self.diagnostics.capture(page, SNAPSHOT_GUEST_FORM, result)

        logger.info("[PIPELINE] Step 5: Filling customer information")
        await checkout.fill_guest_info(page, request.customer_name, request.customer_phone)
        await self.diagnostics.capture(page, SNAPSHOT_GUEST_INFO_FILLED, result)

        logger.info("[PIPELINE] Step 6: Submitting guest form")
        await checkout.submit_guest_form(page)
        await self.diagnostics.capture(page, SNAPSHOT_FINAL_CHECKOUT, result)

        if request.special_instructions.strip():
            logger.info("[PIPELINE] Step 7: Adding special instructions")
            await checkout.add_special_instructions(page, request.special_instructions)

        logger.info("[PIPELINE] Step 8: Verifying payment method")
        await checkout.verify_payment_method(page)
        checkout.mark_ready()
        await self.diagnostics.capture(page, SNAPSHOT_BEFORE_SUBMIT, result)

        logger.info("[PIPELINE] Step 9: Placing order")
        await self.finalizer.submit(page)
        checkout.advance(CheckoutStage.ORDER_PLACED)
        await settle(page, self.settings.default_wait_ms)
        await self.diagnostics.capture(page, SNAPSHOT_CONFIRMATION, result)

        logger.info("[PIPELINE] Step 10: Extracting confirmation")
        await self.finalizer.extract(page, result)
