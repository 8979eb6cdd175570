"""
Centralized logging configuration for the bot.

Usage:
    from app.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Checklist posted for %s", key)
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP and model clients log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "langsmith", "uvicorn.access")


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger to write to stdout.

    Called once from the application lifespan with settings.LOG_LEVEL.
    Unknown level names fall back to INFO.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger, typically for ``__name__`` of the calling module."""
    return logging.getLogger(name)
