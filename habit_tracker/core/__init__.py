"""Core package exports."""

from .config import (
    BASE_DIR,
    DATABASE_URL,
    PROXY_PREFIX,
    get_gym_keywords,
    get_storage_timeout,
)
from .db import Session, build_engine, create_session, engine, get_db, init_db, upgrade_schema
from .errors import HabitTrackerError, MalformedPayload, StorageUnavailable

__all__ = [
    "BASE_DIR",
    "DATABASE_URL",
    "PROXY_PREFIX",
    "get_gym_keywords",
    "get_storage_timeout",
    "engine",
    "Session",
    "build_engine",
    "create_session",
    "get_db",
    "init_db",
    "upgrade_schema",
    "HabitTrackerError",
    "MalformedPayload",
    "StorageUnavailable",
]
