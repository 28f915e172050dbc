"""Checkout stage enumeration."""
from enum import Enum


class CheckoutStage(str, Enum):
    """Stages an order session moves through, in order."""

    STARTED = "started"  # Browser launched, nothing loaded yet
    MENU_LOADED = "menu_loaded"
    CART_FILLED = "cart_filled"
    CHECKOUT_INITIATED = "checkout_initiated"  # Checkout modal open
    GUEST_SELECTED = "guest_selected"  # Guest form showing
    GUEST_INFO_FILLED = "guest_info_filled"
    GUEST_FORM_SUBMITTED = "guest_form_submitted"  # Final checkout page
    NOTES_ADDED = "notes_added"  # Optional
    PAYMENT_VERIFIED = "payment_verified"
    READY_TO_SUBMIT = "ready_to_submit"
    ORDER_PLACED = "order_placed"  # Confirmation page reached

    @property
    def position(self) -> int:
        """Get the position of this stage in the flow."""
        return list(CheckoutStage).index(self)

    def __str__(self) -> str:
        """Return the string value of the stage."""
        return self.value
