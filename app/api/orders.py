"""Order placement API endpoint."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core.dependencies import get_order_automation
from app.services.automation.pipeline import OrderAutomationService
from app.services.ordering.models import OrderRequest


router = APIRouter()
logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("order_items", "customer_name", "customer_phone")


class PlaceOrderRequest(BaseModel):
    """Place order request model. Presence of required fields is checked by the endpoint."""
    order_items: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    pickup_time: Optional[str] = None
    special_instructions: Optional[str] = None

    def missing_fields(self) -> list[str]:
        """Get required fields that are absent or blank."""
        return [
            field for field in REQUIRED_FIELDS
            if not (getattr(self, field) or "").strip()
        ]


@router.post("/place-order")
async def place_order(
    request: Request,
    order: PlaceOrderRequest,
    automation: OrderAutomationService = Depends(get_order_automation),
):
    """Place a pickup order and return the structured result."""
    logger.info(
        f"[PLACE ORDER] Request received - items: '{order.order_items}', "
        f"customer: {order.customer_name}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    if order.missing_fields():
        logger.warning(f"[PLACE ORDER] Missing required fields: {order.missing_fields()}")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": f"Missing required fields: {', '.join(REQUIRED_FIELDS)}",
            },
        )

    try:
        result = await automation.place_order(
            OrderRequest(
                order_items=order.order_items,
                customer_name=order.customer_name,
                customer_phone=order.customer_phone,
                pickup_time=order.pickup_time or "ASAP",
                special_instructions=order.special_instructions or "",
            )
        )
    except Exception as e:
        logger.error(
            f"[PLACE ORDER] Error processing order - Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e)},
        )

    logger.info(
        f"[PLACE ORDER] Sending response - success: {result.success}, "
        f"confirmation: {result.confirmation_number}, "
        f"snapshots: {len(result.diagnostics)}"
    )
    return result.model_dump()
