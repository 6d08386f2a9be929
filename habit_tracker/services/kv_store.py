"""String key-value store backed by the kv_entry table."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from habit_tracker.core.errors import StorageUnavailable
from habit_tracker.models import KeyValueEntry, utc_now

logger = logging.getLogger(__name__)

# Writers share one lock per process so each upsert sees the previous one
_write_lock = threading.Lock()


class KeyValueStore:
    """get/set/delete over string keys, one transaction per call."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        try:
            entry = self.db.get(KeyValueEntry, key)
        except SQLAlchemyError as exc:
            self._rollback()
            raise StorageUnavailable(f"could not read {key!r}") from exc
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        with _write_lock:
            try:
                entry = self.db.get(KeyValueEntry, key)
                if entry is None:
                    entry = KeyValueEntry(key=key, value=value)
                else:
                    entry.value = value
                    entry.updated_at = utc_now()
                self.db.add(entry)
                self.db.commit()
            except SQLAlchemyError as exc:
                self._rollback()
                raise StorageUnavailable(f"could not write {key!r}") from exc

    def delete(self, key: str) -> bool:
        """Remove ``key``; returns whether it existed."""
        with _write_lock:
            try:
                entry = self.db.get(KeyValueEntry, key)
                if entry is None:
                    return False
                self.db.delete(entry)
                self.db.commit()
            except SQLAlchemyError as exc:
                self._rollback()
                raise StorageUnavailable(f"could not delete {key!r}") from exc
        return True

    def items(self, prefix: str = "") -> List[Tuple[str, str]]:
        """All (key, value) pairs whose key starts with ``prefix``, ordered by key."""
        statement = select(KeyValueEntry).order_by(KeyValueEntry.key)
        if prefix:
            statement = statement.where(KeyValueEntry.key.startswith(prefix, autoescape=True))
        try:
            entries = self.db.exec(statement).all()
        except SQLAlchemyError as exc:
            self._rollback()
            raise StorageUnavailable(f"could not list keys under {prefix!r}") from exc
        return [(entry.key, entry.value) for entry in entries]

    def _rollback(self) -> None:
        try:
            self.db.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback failed after storage error", exc_info=True)
