"""Application lifecycle management for startup and shutdown tasks.

This module handles the FastAPI lifespan context manager: logging setup,
database engine creation and cleanup.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from sqlalchemy.engine import make_url

from harmonydb.config import Settings, get_settings
from harmonydb.infrastructure.observability import configure_logging
from harmonydb.infrastructure.persistence import Database

logger = logging.getLogger(__name__)


# Hey future me, SQLite needs the parent directory of the .db file to exist before the first
# connect, otherwise aiosqlite fails with a cryptic "unable to open database file". We don't
# pre-create the file itself, SQLite initializes it on first connection. Only runs for SQLite URLs.
def _ensure_sqlite_directory(settings: Settings) -> None:
    url = make_url(settings.database.url)
    if not url.drivername.startswith("sqlite") or not url.database:
        return
    if url.database == ":memory:":
        return
    parent = Path(url.database).parent
    if str(parent) != ".":
        parent.mkdir(parents=True, exist_ok=True)
        logger.debug("Ensured SQLite parent directory exists: %s", parent)


# Listen future me, everything before `yield` runs at STARTUP, everything after runs at SHUTDOWN.
# The try/finally makes sure the engine is disposed even if startup blows up. Settings come from
# app.state when create_app() was handed explicit ones (tests do that), else from the environment.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown tasks including:
    - Logging configuration
    - Database initialization (optionally creating tables)
    - Resource cleanup
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()

    configure_logging(
        log_level=settings.logging.level,
        json_format=settings.logging.json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    try:
        _ensure_sqlite_directory(settings)

        db = Database(settings)
        app.state.db = db
        logger.info("Database initialized: %s", settings.database.url)

        if settings.database.create_tables_on_startup:
            await db.create_tables()

        yield

    except Exception as e:
        logger.exception("Error during application startup: %s", e)
        raise
    finally:
        logger.info("Shutting down application")
        if hasattr(app.state, "db"):
            await app.state.db.close()
            logger.info("Database connection closed")
