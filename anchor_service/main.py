"""Anchor Service API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map AnchorServiceError to structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Migrations complete before the database pool is opened and traffic is served
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from anchor_service import __version__
from anchor_service.api.error_handlers import register_error_handlers
from anchor_service.api.routes import anchors, health
from anchor_service.config import get_settings
from anchor_service.infrastructure.database import close_db, init_db
from anchor_service.infrastructure.migrations import run_migrations
from anchor_service.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if settings.run_migrations:
        await run_migrations(settings.database_url)
    logger.info("Connecting to database...")
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Anchor service started")
    yield
    logger.info("Anchor service shutting down")
    await close_db()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Anchor Service", version=__version__, lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(health.router)
    app.include_router(anchors.router)
    register_error_handlers(app)
    return app


app = create_app()
