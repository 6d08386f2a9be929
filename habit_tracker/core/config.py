"""Core configuration for Habit Tracker."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# .env values never override variables already set
load_dotenv(".env")

# Repository root, where alembic.ini lives
BASE_DIR = Path(__file__).resolve().parents[2]

# Local SQLite file used when DATABASE_URL is not set
DEFAULT_DATABASE_URL = f"sqlite:///{BASE_DIR / 'instance' / 'habits.db'}"
DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

# Mount prefix, e.g. "/habits"
PROXY_PREFIX = os.getenv("PROXY_PREFIX", "")

LOG_LEVEL = os.getenv("HABITS_LOG_LEVEL", "INFO")


def get_storage_timeout() -> float:
    """Seconds a storage call may wait on a locked database."""
    # SQLite busy timeout; outside 1..60 is clamped
    raw_value = os.getenv("HABITS_STORAGE_TIMEOUT", "5")
    try:
        parsed = float(raw_value)
    except (TypeError, ValueError):
        parsed = 5.0
    return max(1.0, min(parsed, 60.0))


def get_gym_keywords() -> List[str] | None:
    """Keyword override for the gym classifier, or None for the built-in list."""
    raw_value = os.getenv("HABITS_GYM_KEYWORDS", "")
    keywords = [item.strip().lower() for item in raw_value.split(",") if item.strip()]
    return keywords or None
