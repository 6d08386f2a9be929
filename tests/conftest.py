import datetime
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlmodel import Session  # noqa: E402

from habit_tracker.core.db import build_engine, upgrade_schema  # noqa: E402
from habit_tracker.core.errors import StorageUnavailable  # noqa: E402
from habit_tracker.services.kv_store import KeyValueStore  # noqa: E402
from habit_tracker.services.progress_service import ProgressStore  # noqa: E402

# Monday
TODAY = datetime.datetime(2025, 1, 6, 12, 0)


def fixed_clock(moment):
    return lambda: moment


class BrokenKeyValueStore:
    """Key-value store whose backend is always down."""

    def get(self, key):
        raise StorageUnavailable(f"could not read {key!r}")

    def set(self, key, value):
        raise StorageUnavailable(f"could not write {key!r}")

    def delete(self, key):
        raise StorageUnavailable(f"could not delete {key!r}")

    def items(self, prefix=""):
        raise StorageUnavailable(f"could not list keys under {prefix!r}")


@pytest.fixture()
def database_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'habits.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    upgrade_schema(url)
    return url


@pytest.fixture()
def engine(database_url):
    engine = build_engine(database_url, timeout=1)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def kv_store(db):
    return KeyValueStore(db)


@pytest.fixture()
def store(kv_store):
    return ProgressStore(kv_store, clock=fixed_clock(TODAY))


@pytest.fixture()
def now():
    return TODAY


@pytest.fixture()
def broken_kv_store():
    return BrokenKeyValueStore()


@pytest.fixture()
def make_store(kv_store):
    def _make(moment=TODAY, classifier=None, backend=None):
        return ProgressStore(backend or kv_store, classifier=classifier, clock=fixed_clock(moment))

    return _make
