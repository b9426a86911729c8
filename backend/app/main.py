"""Sleep Tracker API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SleepTrackerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and feed cache initialized on startup, released on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py and are registered here
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import following_feed, follows, health, sleep_records
from app.config import get_settings
from app.infrastructure.cache import init_cache, close_cache
from app.infrastructure.database import init_db, close_db
from app.infrastructure.observability import setup_logging
from app.infrastructure.request_logging import register_request_logging

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
    init_cache(
        settings.cache_backend,
        redis_url=settings.redis_url,
        prefix=settings.cache_key_prefix,
        followees_ttl_seconds=settings.followees_cache_ttl_seconds,
        records_ttl_seconds=settings.records_cache_ttl_seconds,
    )
    logger.info("Sleep Tracker API started")
    yield
    logger.info("Sleep Tracker API shutting down")
    await close_cache()
    await close_db()


app = FastAPI(
    title="Sleep Tracker API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
if settings.enable_request_logging:
    register_request_logging(app)

register_error_handlers(app)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(following_feed.router)
app.include_router(sleep_records.router)
app.include_router(follows.router)
