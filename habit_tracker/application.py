"""FastAPI application assembly."""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from habit_tracker.core import db as core_db
from habit_tracker.core.config import PROXY_PREFIX
from habit_tracker.core.logging_setup import configure_logging
from habit_tracker.services.theme_service import ThemeController, ThemeSettings, ThemeSettingsStore
from habit_tracker.web.routers import progress_router, routine_router, stats_router, theme_router

logger = logging.getLogger(__name__)


def _log_theme_change(settings: ThemeSettings) -> None:
    logger.info("Theme is now mode=%s color=%#010x", settings.mode.name, settings.seed_color)


def create_app(theme_controller: ThemeController | None = None) -> FastAPI:
    configure_logging()
    # Served under PROXY_PREFIX when behind a proxy
    proxy_prefix = os.getenv("PROXY_PREFIX", PROXY_PREFIX)

    app = FastAPI(title="Habit Tracker", root_path=proxy_prefix)

    # Theme state is owned here and handed to routes through a dependency
    load_theme = theme_controller is None
    if theme_controller is None:
        theme_controller = ThemeController(ThemeSettingsStore(core_db.create_session))
    theme_controller.subscribe(_log_theme_change)
    app.state.theme = theme_controller

    app.include_router(progress_router)
    app.include_router(routine_router)
    app.include_router(stats_router)
    app.include_router(theme_router)

    @app.on_event("startup")
    def _startup() -> None:
        # Schema first; the saved theme lives in the same table
        core_db.init_db()
        if load_theme:
            theme_controller.load()

    return app
