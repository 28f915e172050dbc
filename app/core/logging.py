"""Logging configuration."""
import logging
import sys
from typing import Optional, Union

from app.core.config import settings


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """Configure application logging at the given or configured level."""
    logging.basicConfig(
        level=level if level is not None else settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Browser driver and HTTP client chatter
    for name in ("playwright", "asyncio", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)
