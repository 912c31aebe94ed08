"""Plub API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PlubError -> {statusCode, message, data} responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; this module only wires
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from plub.api.error_handlers import register_error_handlers
from plub.api.routes import (
    accounts, auth, categories, feeds, health, notices, plubbings, recruits,
    reports, todos,
)
from plub.config import get_settings
from plub.infrastructure import database
from plub.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Plub API started")
    yield
    await manager.dispose()
    logger.info("Plub API shutting down")


app = FastAPI(title="Plub API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(accounts.router)
app.include_router(categories.router)
app.include_router(plubbings.router)
app.include_router(recruits.router)
app.include_router(recruits.bookmark_router)
app.include_router(feeds.router)
app.include_router(todos.router)
app.include_router(notices.router)
app.include_router(reports.router)

register_error_handlers(app)
