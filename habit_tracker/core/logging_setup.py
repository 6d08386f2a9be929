"""Process-wide logging setup."""

from __future__ import annotations

import logging

from habit_tracker.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    # Unknown level names fall back to INFO
    resolved = logging.getLevelName((level or LOG_LEVEL).upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
