"""Core configuration and infrastructure helpers."""

from .config import (
    ADMIN_EMAILS,
    ALLOWED_CORS_ORIGINS,
    DATABASE_URL,
    DB_RESET,
    ENV,
    IS_DEVELOPMENT,
    LOG_LEVEL,
    SEED_TRACKS,
)
from .database import engine, get_session
from .logging import configure_logging
from .time import format_time, isoformat, utcnow, week_progress

__all__ = [
    "ADMIN_EMAILS",
    "ALLOWED_CORS_ORIGINS",
    "DATABASE_URL",
    "DB_RESET",
    "ENV",
    "IS_DEVELOPMENT",
    "LOG_LEVEL",
    "SEED_TRACKS",
    "configure_logging",
    "engine",
    "format_time",
    "get_session",
    "isoformat",
    "utcnow",
    "week_progress",
]
