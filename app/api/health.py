"""Health check endpoint."""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request

from app.core.config import Settings
from app.core.dependencies import get_settings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(request: Request, settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": f"{settings.restaurant_name} Order Automation",
    }
