import datetime
from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from habit_tracker.application import create_app
from habit_tracker.core import db as core_db
from habit_tracker.core.errors import StorageUnavailable
from habit_tracker.services.classifier_service import GymExerciseClassifier
from habit_tracker.services.theme_service import ThemeController, ThemeSettingsStore
from habit_tracker.web.dependencies import get_classifier, get_clock

# Wednesday
NOW = datetime.datetime(2025, 1, 8, 18, 0)


@pytest.fixture()
def app(database_url, engine):
    core_db.refresh_engine_from_env()
    controller = ThemeController(ThemeSettingsStore(lambda: Session(engine)))
    application = create_app(theme_controller=controller)
    application.dependency_overrides[get_clock] = lambda: (lambda: NOW)
    yield application
    application.dependency_overrides.clear()


@contextmanager
def _client(app):
    with TestClient(app) as client:
        yield client


def _save(client, date_str, *names, pending=()):
    habits = [{"name": name, "completed": True} for name in names]
    habits += [{"name": name, "completed": False} for name in pending]
    return client.put(f"/api/progress/{date_str}", json={"habits": habits})


def test_save_and_read_progress(app):
    with _client(app) as client:
        response = _save(client, "2025-01-06", "Press banca", "Meditar 10 minutos", pending=["Aperturas"])
        assert response.status_code == 200
        assert response.json() == {"saved": True, "date": "2025-01-06"}

        day = client.get("/api/progress/2025-01-06").json()
        everything = client.get("/api/progress").json()
        done = client.get("/api/progress/2025-01-06/habits/Press%20banca").json()
        pending = client.get("/api/progress/2025-01-06/habits/Aperturas").json()

    assert day == {"date": "2025-01-06", "completed": ["Meditar 10 minutos", "Press banca"]}
    assert everything == {"2025-01-06": ["Meditar 10 minutos", "Press banca"]}
    assert done["completed"] is True
    assert pending["completed"] is False


def test_unmarking_everything_removes_the_day(app):
    with _client(app) as client:
        _save(client, "2025-01-06", "Press banca")
        _save(client, "2025-01-06", pending=["Press banca"])

        assert client.get("/api/progress").json() == {}


@pytest.mark.parametrize(
    "path",
    ["/api/progress/not-a-date", "/api/checklist/2025-13-01", "/api/stats/weekly?start=yesterday"],
)
def test_invalid_dates_are_rejected(app, path):
    with _client(app) as client:
        response = client.get(path)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid date format"


def test_invalid_month_is_rejected(app):
    with _client(app) as client:
        response = client.get("/api/stats/monthly?month=2025/01")

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid month format"


@pytest.mark.parametrize(
    "body",
    [{"habits": "Press banca"}, {"habits": ["Press banca"]}, {}, ["Press banca"]],
)
def test_save_rejects_bad_bodies(app, body):
    with _client(app) as client:
        response = client.put("/api/progress/2025-01-06", json=body)

    assert response.status_code == 400


def test_save_rejects_non_json_body(app):
    with _client(app) as client:
        response = client.put(
            "/api/progress/2025-01-06",
            content="habits",
            headers={"content-type": "application/json"},
        )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid JSON body"


def test_failed_write_returns_503(app, monkeypatch):
    def _unavailable(self, key, value):
        raise StorageUnavailable("disk full")

    monkeypatch.setattr("habit_tracker.services.kv_store.KeyValueStore.set", _unavailable)

    with _client(app) as client:
        response = _save(client, "2025-01-06", "Press banca")

    assert response.status_code == 503
    assert response.json()["detail"] == "Progress could not be saved"


def test_weekly_stats_default_to_current_week(app):
    with _client(app) as client:
        _save(client, "2025-01-06", "Press banca", "Meditar 10 minutos")
        _save(client, "2025-01-08", "Leer 20 páginas")
        _save(client, "2025-01-10", "Press militar")
        payload = client.get("/api/stats/weekly").json()

    assert payload["start"] == "2025-01-06"
    assert payload["completedDays"] == 2
    assert payload["gymDays"] == 1
    assert payload["habitDays"] == 2
    assert payload["daysElapsed"] == 3
    assert payload["ratios"]["completedDays"] == pytest.approx(2 / 7)
    # Friday has records but lies after now
    assert [day["completed"] for day in payload["days"]] == [True, False, True, False, False, False, False]


def test_monthly_stats_with_ratios(app):
    with _client(app) as client:
        _save(client, "2025-01-06", "Press banca")
        _save(client, "2025-01-07", "Meditar 10 minutos")
        current = client.get("/api/stats/monthly").json()
        future = client.get("/api/stats/monthly?month=2025-02").json()

    assert current["month"] == "2025-01"
    assert current["totalDays"] == 8
    assert current["completedDays"] == 2
    assert current["gymDays"] == 1
    assert current["habitDays"] == 1
    assert current["ratios"]["completedDays"] == pytest.approx(0.25)
    assert future == {
        "month": "2025-02",
        "totalDays": 0,
        "completedDays": 0,
        "gymDays": 0,
        "habitDays": 0,
        "ratios": {"completedDays": 0.0, "gymDays": 0.0, "habitDays": 0.0},
    }


def test_stats_use_the_injected_classifier(app):
    app.dependency_overrides[get_classifier] = lambda: GymExerciseClassifier(["leer"])

    with _client(app) as client:
        _save(client, "2025-01-07", "Leer 20 páginas")
        payload = client.get("/api/stats/weekly?start=2025-01-06").json()

    assert payload["gymDays"] == 1
    assert payload["habitDays"] == 0


def test_checklist_reflects_saved_progress(app):
    with _client(app) as client:
        _save(client, "2025-01-08", "Sentadilla", "Tomar vitaminas")
        payload = client.get("/api/checklist/2025-01-08", params={"custom": "Tomar vitaminas"}).json()

    assert payload["title"] == "Día 3: Pierna"
    assert payload["total"] == 9
    assert payload["completed"] == 2
    assert payload["habits"][3] == {"name": "Sentadilla", "completed": True, "type": "exercise"}
    assert payload["habits"][-1] == {"name": "Tomar vitaminas", "completed": True, "type": "custom"}


def test_goals_and_classifier_endpoints(app):
    with _client(app) as client:
        goals = client.get("/api/goals").json()["goals"]
        gym = client.get("/api/classify", params={"name": "PRESS MILITAR"}).json()
        habit = client.get("/api/classify", params={"name": "Meditar 10 minutos"}).json()

    assert len(goals) == 3
    assert goals[0]["progress"] == pytest.approx(0.68)
    assert gym["is_gym_exercise"] is True
    assert habit["is_gym_exercise"] is False


def test_theme_defaults_and_update(app):
    changes = []
    app.state.theme.subscribe(changes.append)

    with _client(app) as client:
        assert client.get("/api/theme").json() == {"mode": 0, "color": 0xFF673AB7}

        response = client.put("/api/theme", json={"mode": 2, "color": 0xFF8BC34A})
        assert response.status_code == 200
        assert response.json() == {"saved": True, "mode": 2, "color": 0xFF8BC34A}

        assert client.get("/api/theme").json() == {"mode": 2, "color": 0xFF8BC34A}

    assert len(changes) == 1
    assert app.state.theme.store.load().as_dict() == {"mode": 2, "color": 0xFF8BC34A}


@pytest.mark.parametrize("body", [{"mode": 9}, {"mode": True}, {"color": "blue"}, {"color": -1}])
def test_theme_rejects_invalid_values(app, body):
    with _client(app) as client:
        response = client.put("/api/theme", json=body)

    assert response.status_code == 400
