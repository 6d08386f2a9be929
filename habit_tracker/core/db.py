"""Database engine, schema upgrade and session helpers."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Iterator

from alembic import command
from alembic.config import Config
from sqlalchemy.engine import make_url
from sqlmodel import Session, create_engine

from habit_tracker.core.config import BASE_DIR, DATABASE_URL, DEFAULT_DATABASE_URL, get_storage_timeout

logger = logging.getLogger(__name__)


def _normalize_database_url(database_url: str) -> str:
    # Heroku-style postgres:// is rejected by SQLAlchemy 2
    normalized_url = database_url or DEFAULT_DATABASE_URL
    if normalized_url.startswith("postgres://"):
        normalized_url = normalized_url.replace("postgres://", "postgresql+psycopg2://", 1)
    return normalized_url


def build_engine(database_url: str, timeout: float | None = None):
    """Create an engine whose connections give up after ``timeout`` seconds."""
    normalized_url = _normalize_database_url(database_url)
    timeout = timeout if timeout is not None else get_storage_timeout()
    if normalized_url.startswith("sqlite"):
        connect_args = {"timeout": timeout, "check_same_thread": False}
    else:
        connect_args = {"connect_timeout": max(1, int(timeout))}
    return create_engine(normalized_url, connect_args=connect_args)


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def upgrade_schema(database_url: str) -> None:
    """Apply Alembic migrations up to the latest revision."""
    normalized_url = _normalize_database_url(database_url)
    _ensure_sqlite_directory(normalized_url)

    config = Config(str(BASE_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BASE_DIR / "migrations"))
    # ConfigParser treats % as interpolation
    config.set_main_option("sqlalchemy.url", normalized_url.replace("%", "%%"))
    command.upgrade(config, "head")
    logger.info("Schema is at head for %s", make_url(normalized_url).render_as_string(hide_password=True))


def _database_url_from_env() -> str:
    # Read at call time so a changed DATABASE_URL takes effect
    return os.getenv("DATABASE_URL", DATABASE_URL)


# Replaced by refresh_engine_from_env
_current_database_url = _normalize_database_url(_database_url_from_env())
engine = build_engine(_current_database_url)
_db_initialized = False
_db_init_lock = threading.Lock()


def refresh_engine_from_env() -> None:
    """Refresh engine if DATABASE_URL changed after initial module import."""
    global engine, _db_initialized, _current_database_url

    latest_database_url = _normalize_database_url(_database_url_from_env())
    if latest_database_url == _current_database_url:
        return

    engine = build_engine(latest_database_url)
    _current_database_url = latest_database_url
    _db_initialized = False


def _ensure_db_initialized() -> None:
    global _db_initialized
    if _db_initialized:
        return
    # Double-checked; the first caller upgrades the schema
    with _db_init_lock:
        if _db_initialized:
            return
        upgrade_schema(_current_database_url)
        _db_initialized = True


def init_db() -> None:
    _ensure_db_initialized()


def create_session() -> Session:
    # Caller closes the session
    _ensure_db_initialized()
    return Session(engine)


def get_db() -> Iterator[Session]:
    # One session per request
    _ensure_db_initialized()
    with Session(engine) as db:
        yield db
