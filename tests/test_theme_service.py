import json
from contextlib import contextmanager

import pytest
from sqlmodel import Session

from habit_tracker.core.errors import StorageUnavailable
from habit_tracker.services.theme_service import (
    DEFAULT_SEED_COLOR,
    PALETTE,
    THEME_KEY,
    ThemeController,
    ThemeMode,
    ThemeSettings,
    ThemeSettingsStore,
    parse_theme_settings,
)


@pytest.fixture()
def theme_store(engine):
    return ThemeSettingsStore(lambda: Session(engine))


class _BrokenThemeStore:
    def load(self):
        return ThemeSettings()

    def save(self, settings):
        raise StorageUnavailable("disk full")


def test_missing_settings_use_defaults(theme_store):
    assert theme_store.load() == ThemeSettings(ThemeMode.AUTOMATIC, DEFAULT_SEED_COLOR)


def test_settings_round_trip_through_storage(theme_store, kv_store):
    theme_store.save(ThemeSettings(ThemeMode.DARK, PALETTE["Verde Pistacho"]))

    assert json.loads(kv_store.get(THEME_KEY)) == {"mode": 2, "color": 0xFF8BC34A}
    assert theme_store.load() == ThemeSettings(ThemeMode.DARK, 0xFF8BC34A)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("not json", ThemeSettings()),
        ("[1, 2]", ThemeSettings()),
        ('{"mode": 7, "color": 4278190335}', ThemeSettings(ThemeMode.AUTOMATIC, 4278190335)),
        ('{"mode": 1, "color": "blue"}', ThemeSettings(ThemeMode.LIGHT, DEFAULT_SEED_COLOR)),
        ('{"mode": [1], "color": -5}', ThemeSettings()),
        ('{"color": 4280391411}', ThemeSettings(ThemeMode.AUTOMATIC, 4280391411)),
    ],
)
def test_unusable_fields_fall_back_to_defaults(raw, expected):
    assert parse_theme_settings(raw) == expected


def test_controller_notifies_listeners_and_persists(theme_store):
    controller = ThemeController(theme_store)
    seen = []
    controller.subscribe(seen.append)

    assert controller.set_mode(ThemeMode.LIGHT) is True
    assert controller.set_seed_color(PALETTE["Azul"]) is True

    assert [item.mode for item in seen] == [ThemeMode.LIGHT, ThemeMode.LIGHT]
    assert seen[-1].seed_color == 0xFF2196F3
    assert theme_store.load() == ThemeSettings(ThemeMode.LIGHT, 0xFF2196F3)


def test_unsubscribe_stops_notifications(theme_store):
    controller = ThemeController(theme_store)
    seen = []
    unsubscribe = controller.subscribe(seen.append)

    unsubscribe()
    unsubscribe()
    controller.set_mode(ThemeMode.DARK)

    assert seen == []


def test_controller_load_restores_saved_settings(theme_store):
    theme_store.save(ThemeSettings(ThemeMode.DARK, PALETTE["Naranja"]))
    controller = ThemeController(theme_store)
    seen = []
    controller.subscribe(seen.append)

    controller.load()

    assert controller.settings == ThemeSettings(ThemeMode.DARK, 0xFFFF5722)
    assert seen == [controller.settings]


def test_failed_save_keeps_in_memory_change():
    controller = ThemeController(_BrokenThemeStore())
    seen = []
    controller.subscribe(seen.append)

    assert controller.set_mode(ThemeMode.DARK) is False
    assert controller.settings.mode is ThemeMode.DARK
    assert len(seen) == 1


def test_invalid_values_are_rejected(theme_store):
    controller = ThemeController(theme_store)

    with pytest.raises(ValueError):
        controller.set_mode(5)
    with pytest.raises(ValueError):
        controller.set_seed_color(-1)
    with pytest.raises(ValueError):
        controller.update(ThemeMode.LIGHT, True)
    assert controller.settings == ThemeSettings()


def test_store_save_raises_when_backend_is_down(caplog):
    @contextmanager
    def _broken_session():
        raise StorageUnavailable("no database")
        yield  # pragma: no cover

    store = ThemeSettingsStore(_broken_session)

    assert store.load() == ThemeSettings()
    with pytest.raises(StorageUnavailable):
        store.save(ThemeSettings(ThemeMode.DARK))
    assert "Could not save theme settings" in caplog.text
