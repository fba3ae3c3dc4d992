"""Game Exchange API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ExchangeError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and notification worker initialized on startup via lifespan,
      both released on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Notifications leave the request path through a queue drained by one
      background task started here
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import exchanges, games, health, receive, users
from app.config import get_settings
from app.infrastructure import database, notifications
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    notifications.init_notifier(
        settings.notification_webhook_url,
        timeout_seconds=settings.notification_timeout_seconds,
        max_queue_size=settings.notification_queue_size,
        kafka_bootstrap_servers=settings.notification_kafka_bootstrap_servers,
    ).start()
    logger.info("Game Exchange API started")
    yield
    logger.info("Game Exchange API shutting down")
    await notifications.notifier.stop()
    await database.db_manager.dispose()


app = FastAPI(
    title="Game Exchange API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(games.router)
app.include_router(exchanges.router)
app.include_router(receive.router)

register_error_handlers(app)
