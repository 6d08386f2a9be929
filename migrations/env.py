"""Alembic migration environment for Habit Tracker."""

from __future__ import annotations

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url
from sqlmodel import SQLModel

from habit_tracker import models as _models  # noqa: F401

config = context.config
target_metadata = SQLModel.metadata


def _configured_url() -> str:
    database_url = config.get_main_option("sqlalchemy.url")
    if not database_url:
        raise ValueError("sqlalchemy.url must be configured for Alembic migrations.")
    return database_url


def _context_options(database_url: str) -> dict:
    # SQLite cannot ALTER most constraints in place, so it needs batch mode
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": make_url(database_url).get_backend_name() == "sqlite",
    }


def run_migrations_offline() -> None:
    """Emit SQL without a live DB connection."""
    database_url = _configured_url()
    context.configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_context_options(database_url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a live DB connection."""
    database_url = _configured_url()
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = database_url
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, **_context_options(database_url))

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
