"""Receipt analyzer FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from receiptanalyzer.api import health_router, main_router, register_exception_handlers
from receiptanalyzer.core.config import get_settings
from receiptanalyzer.core.logging_config import setup_logging
from receiptanalyzer.middleware import CORSHeadersMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI as FastAPIType

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPIType) -> AsyncGenerator[None, None]:
    """Manage application lifecycle."""
    settings = get_settings()
    logger.info(
        "Starting receipt analyzer (model=%s, api=%s)",
        settings.vision_model,
        settings.vision_api_host,
    )
    yield
    logger.info("Shutting down receipt analyzer...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Receipt Analyzer",
        version=settings.app_version,
        description="Categorizes receipt expenses with a vision language model",
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS headers on every response, including errors
    app.add_middleware(
        CORSHeadersMiddleware,
        allow_origin=settings.cors_allow_origin,
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(main_router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    log_level = settings.log_level.lower()

    uvicorn.run(
        "receiptanalyzer.main:app",
        host="0.0.0.0",  # noqa: S104
        port=8000,
        reload=settings.debug,
        log_level=log_level,
    )
