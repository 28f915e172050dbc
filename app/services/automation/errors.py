"""Failures raised by the order automation pipeline."""
from typing import Optional, Sequence


class AutomationFailure(Exception):
    """Umbrella failure for anything that aborts an order placement."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def root_cause(self) -> BaseException:
        """Get the innermost failure in the cause chain."""
        current: BaseException = self
        while isinstance(current, AutomationFailure) and current.cause is not None:
            current = current.cause
        return current


class ElementNotFound(AutomationFailure):
    """No locator strategy produced an element for the label."""

    def __init__(self, label: str):
        super().__init__(f"Could not find element: {label}")
        self.label = label


class RequiredFieldMissing(AutomationFailure):
    """A must-fill form field is absent from the page."""

    def __init__(self, field_name: str):
        super().__init__(f"{field_name} field not found")
        self.field_name = field_name


class AddToCartFailed(AutomationFailure):
    """The customization modal offered no usable add-to-cart control."""

    def __init__(self, item_name: str):
        super().__init__(f"Could not find Add to Cart button for {item_name}")
        self.item_name = item_name


class CartAdditionFailed(AutomationFailure):
    """An item could not be added; remaining items are not attempted."""

    def __init__(self, item_name: str, cause: BaseException):
        super().__init__(f"Failed to add {item_name} to cart: {cause}", cause=cause)
        self.item_name = item_name


class StateTransitionFailed(AutomationFailure):
    """A checkout transition could not be confirmed on the page."""

    def __init__(self, stage: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, cause=cause)
        self.stage = stage


class StateTransitionTimeout(StateTransitionFailed):
    """The page never showed the marker expected after a checkout transition."""

    def __init__(self, stage: str, markers: Sequence[str], timeout_ms: int):
        super().__init__(
            stage,
            f"Timed out after {timeout_ms}ms waiting for {' or '.join(markers)} "
            f"to reach stage {stage}",
        )
        self.markers = list(markers)
        self.timeout_ms = timeout_ms


class OrderSubmissionFailed(AutomationFailure):
    """Placing the order or reaching its confirmation page failed."""
