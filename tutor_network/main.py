"""Tutor Network API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TutorNetworkError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan context manager owns logging setup and the DB engine
    - Error handlers live in api/error_handlers.py and are registered here
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tutor_network.api.error_handlers import register_error_handlers
from tutor_network.api.routes import (
    auth,
    availability,
    bookings,
    health,
    notes,
    profile,
    questionnaire,
    sessions,
    subjects,
)
from tutor_network.config import get_settings
from tutor_network.infrastructure.database import close_db, init_db
from tutor_network.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY not set: AI features will degrade")
    logger.info("Tutor Network API started")
    yield
    logger.info("Tutor Network API shutting down")
    await close_db()


app = FastAPI(
    title="Tutor Network API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(subjects.router)
app.include_router(availability.router)
app.include_router(bookings.router)
app.include_router(notes.router)
app.include_router(sessions.router)
app.include_router(questionnaire.router)

register_error_handlers(app)
