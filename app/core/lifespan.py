from contextlib import asynccontextmanager
from fastapi import FastAPI

from app.core.config import settings
from app.core.debounce import get_debouncer
from app.core.logging import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Lifespan function for the FastAPI application.
    Handles startup and shutdown events for application services.
    """
    # 1. Configure logging
    setup_logging(settings.LOG_LEVEL)
    logger.info("%s is running", settings.PROJECT_NAME)

    yield

    # 2. Drop analyses still waiting out their debounce delay
    await get_debouncer().shutdown()
