"""Theme preferences: persistence and change notification."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, ContextManager, List

from sqlmodel import Session

from habit_tracker.core.errors import StorageUnavailable
from habit_tracker.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

THEME_KEY = "theme_settings"
MAX_ARGB = 0xFFFFFFFF


class ThemeMode(enum.IntEnum):
    AUTOMATIC = 0
    LIGHT = 1
    DARK = 2


# Seed colors offered on the settings screen (packed ARGB)
PALETTE = {
    "Púrpura": 0xFF673AB7,
    "Verde Pistacho": 0xFF8BC34A,
    "Azul": 0xFF2196F3,
    "Naranja": 0xFFFF5722,
}
DEFAULT_SEED_COLOR = PALETTE["Púrpura"]


@dataclass(frozen=True)
class ThemeSettings:
    mode: ThemeMode = ThemeMode.AUTOMATIC
    seed_color: int = DEFAULT_SEED_COLOR

    def as_dict(self) -> dict:
        return {"mode": int(self.mode), "color": self.seed_color}


def _valid_color(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MAX_ARGB


def parse_theme_settings(raw: str | None) -> ThemeSettings:
    """Decode stored settings; anything unusable falls back to the defaults."""
    default = ThemeSettings()
    if raw is None:
        return default
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring theme settings that are not valid JSON")
        return default
    if not isinstance(data, dict):
        logger.warning("Ignoring theme settings of type %s", type(data).__name__)
        return default

    mode = data.get("mode", int(default.mode))
    if not isinstance(mode, int) or isinstance(mode, bool) or mode not in {item.value for item in ThemeMode}:
        logger.warning("Unknown theme mode %r, using default", mode)
        mode = default.mode
    color = data.get("color", default.seed_color)
    if not _valid_color(color):
        logger.warning("Invalid seed color %r, using default", color)
        color = default.seed_color
    return ThemeSettings(mode=ThemeMode(mode), seed_color=color)


class ThemeSettingsStore:
    """Reads and writes the theme_settings key, one session per call."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        self.session_factory = session_factory

    def load(self) -> ThemeSettings:
        try:
            with self.session_factory() as db:
                raw = KeyValueStore(db).get(THEME_KEY)
        except StorageUnavailable:
            logger.warning("Theme settings unavailable, using defaults", exc_info=True)
            return ThemeSettings()
        return parse_theme_settings(raw)

    def save(self, settings: ThemeSettings) -> None:
        try:
            with self.session_factory() as db:
                KeyValueStore(db).set(THEME_KEY, json.dumps(settings.as_dict()))
        except StorageUnavailable:
            logger.exception("Could not save theme settings")
            raise


ThemeListener = Callable[[ThemeSettings], None]


class ThemeController:
    """Application-owned theme state with an explicit listener list."""

    def __init__(self, store: ThemeSettingsStore, settings: ThemeSettings | None = None):
        self.store = store
        self.settings = settings or ThemeSettings()
        self._listeners: List[ThemeListener] = []

    def subscribe(self, listener: ThemeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.settings)

    def load(self) -> ThemeSettings:
        self.settings = self.store.load()
        self._notify()
        return self.settings

    def _apply(self, settings: ThemeSettings) -> bool:
        # In-memory change and notification happen even if the write fails
        self.settings = settings
        self._notify()
        try:
            self.store.save(settings)
        except StorageUnavailable:
            return False
        return True

    def set_mode(self, mode: int | ThemeMode) -> bool:
        return self._apply(replace(self.settings, mode=ThemeMode(mode)))

    def set_seed_color(self, color: int) -> bool:
        if not _valid_color(color):
            raise ValueError(f"seed color must be a packed ARGB integer, got {color!r}")
        return self._apply(replace(self.settings, seed_color=color))

    def update(self, mode: int | ThemeMode, color: int) -> bool:
        """Set both fields with a single notification and write."""
        if not _valid_color(color):
            raise ValueError(f"seed color must be a packed ARGB integer, got {color!r}")
        return self._apply(ThemeSettings(mode=ThemeMode(mode), seed_color=color))
