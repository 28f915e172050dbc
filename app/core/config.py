"""Application configuration."""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Restaurant
    restaurant_name: str = "Social 7 Bar & Grill"
    restaurant_url: str = "https://order.tbdine.com/pickup/48684/menu"

    # Guest checkout identity
    bot_email: str = "orders@example.com"
    bot_last_name: str = "PAM"  # Tags automated orders in the restaurant's records

    # Browser
    headless: bool = True

    # Bounded waits; Playwright treats a timeout of 0 as "wait forever"
    navigation_timeout_ms: int = Field(default=30000, gt=0)
    guest_submit_timeout_ms: int = Field(default=10000, gt=0)
    order_submit_timeout_ms: int = Field(default=15000, gt=0)
    customization_timeout_ms: int = Field(default=2000, gt=0)
    selector_click_timeout_ms: int = Field(default=500, gt=0)

    # Settle delays, 0 disables
    default_wait_ms: int = Field(default=2000, ge=0)
    short_wait_ms: int = Field(default=500, ge=0)
    keystroke_delay_ms: int = Field(default=50, ge=0)

    # Diagnostics
    screenshot_on_error: bool = True
    error_html_limit: int = 5000

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
