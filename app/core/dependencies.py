"""FastAPI dependencies."""
from app.core.config import Settings, settings
from app.services.automation.pipeline import OrderAutomationService


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def get_order_automation() -> OrderAutomationService:
    """Get an order automation service; each order runs in its own browser session."""
    return OrderAutomationService(settings=get_settings())
