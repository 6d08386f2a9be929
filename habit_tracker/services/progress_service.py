"""Completion log persistence and the statistics derived from it."""

from __future__ import annotations

import calendar
import datetime
import json
import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Set

from habit_tracker.core.errors import MalformedPayload, StorageUnavailable
from habit_tracker.services.classifier_service import GymExerciseClassifier, default_classifier
from habit_tracker.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

# One key per day: daily_habits:2025-01-06 -> ["Press banca", ...]
HABITS_KEY_PREFIX = "daily_habits:"
DATE_FORMAT = "%Y-%m-%d"
WEEK_LENGTH = 7

CompletionLog = Dict[datetime.date, Set[str]]


def coerce_date(value: Any) -> datetime.date:
    """Accept a date, a datetime or a YYYY-MM-DD string."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        return datetime.datetime.strptime(value.strip(), DATE_FORMAT).date()
    raise ValueError(f"Unsupported date value: {value!r}")


def _day_key(day: datetime.date) -> str:
    return f"{HABITS_KEY_PREFIX}{day.isoformat()}"


def _clean_names(names: Iterable[str]) -> Set[str]:
    return {name for name in names if isinstance(name, str) and name}


def decode_day_value(raw: str) -> Set[str]:
    """Decode one stored day; raises MalformedPayload on anything but a list of strings."""
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedPayload("day value is not valid JSON") from exc
    if not isinstance(decoded, list):
        raise MalformedPayload(f"day value must be a list, got {type(decoded).__name__}")
    if not all(isinstance(item, str) for item in decoded):
        raise MalformedPayload("day value must only contain strings")
    return _clean_names(decoded)


def parse_completion_payload(raw: Any) -> CompletionLog:
    """Decode the whole-log interchange object ``{"YYYY-MM-DD": [names]}``.

    Invalid JSON, a non-object payload or a non-string habit name make the
    whole payload count as no history. A value that is not a list yields an
    empty day, and keys that are not dates are skipped.
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring completion payload that is not valid JSON")
            return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring completion payload of type %s", type(raw).__name__)
        return {}

    parsed: CompletionLog = {}
    for key, value in raw.items():
        if not isinstance(value, list):
            continue
        if not all(isinstance(item, str) for item in value):
            logger.warning("Ignoring completion payload with non-string names on %s", key)
            return {}
        try:
            day = coerce_date(key)
        except ValueError:
            logger.warning("Skipping completion payload key %r", key)
            continue
        names = _clean_names(value)
        if names:
            parsed[day] = names
    return parsed


@dataclass(frozen=True)
class MonthlyStats:
    total_days: int = 0
    completed_days: int = 0
    gym_days: int = 0
    habit_days: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "totalDays": self.total_days,
            "completedDays": self.completed_days,
            "gymDays": self.gym_days,
            "habitDays": self.habit_days,
        }


@dataclass(frozen=True)
class WeeklyStats:
    completed_days: int = 0
    gym_days: int = 0
    habit_days: int = 0
    days_elapsed: int = 0

    def ratio(self, field: str) -> float:
        # Always over a full week, even while the week is still running
        return getattr(self, field) / WEEK_LENGTH

    def as_dict(self) -> Dict[str, int]:
        return {
            "completedDays": self.completed_days,
            "gymDays": self.gym_days,
            "habitDays": self.habit_days,
        }


@dataclass
class _DayTally:
    counted: int = 0
    completed: int = 0
    gym: int = 0
    habit: int = 0

    def add(self, names: Set[str], classify: Callable[[str], bool]) -> None:
        self.counted += 1
        if names:
            self.completed += 1
        if any(classify(name) for name in names):
            self.gym += 1
        if any(not classify(name) for name in names):
            self.habit += 1

    def floored(self) -> Dict[str, int]:
        return {key: max(0, value) for key, value in asdict(self).items()}


class ProgressStore:
    """Durable record of which habits were completed on which day."""

    def __init__(
        self,
        kv_store: KeyValueStore,
        classifier: GymExerciseClassifier | None = None,
        clock: Callable[[], datetime.datetime] | None = None,
    ):
        self.kv_store = kv_store
        self.classifier = classifier or default_classifier
        self.clock = clock or datetime.datetime.now

    def _today(self) -> datetime.date:
        return coerce_date(self.clock())

    def record_completion(self, day: Any, habit_names: Iterable[str]) -> None:
        """Replace the completed set for ``day``; an empty set removes the day."""
        day = coerce_date(day)
        names = _clean_names(habit_names)
        try:
            if names:
                payload = json.dumps(sorted(names), ensure_ascii=False)
                self.kv_store.set(_day_key(day), payload)
            else:
                self.kv_store.delete(_day_key(day))
        except StorageUnavailable:
            logger.exception("Could not record %d completed habits for %s", len(names), day)
            raise
        logger.debug("Recorded %d completed habits for %s", len(names), day)

    def load_day(self, day: Any) -> Set[str]:
        day = coerce_date(day)
        try:
            raw = self.kv_store.get(_day_key(day))
        except StorageUnavailable:
            logger.warning("Completion log unavailable, treating %s as empty", day, exc_info=True)
            return set()
        if raw is None:
            return set()
        try:
            return decode_day_value(raw)
        except MalformedPayload as exc:
            logger.warning("Ignoring malformed completions for %s: %s", day, exc)
            return set()

    def load_all(self) -> CompletionLog:
        try:
            items = self.kv_store.items(HABITS_KEY_PREFIX)
        except StorageUnavailable:
            logger.warning("Completion log unavailable, treating it as empty", exc_info=True)
            return {}

        log: CompletionLog = {}
        for key, raw in items:
            try:
                day = coerce_date(key[len(HABITS_KEY_PREFIX):])
            except ValueError:
                logger.warning("Skipping completion key %r", key)
                continue
            try:
                names = decode_day_value(raw)
            except MalformedPayload as exc:
                logger.warning("Ignoring malformed completions for %s: %s", day, exc)
                continue
            if names:
                log[day] = names
        return log

    def is_completed(self, day: Any, habit_name: str) -> bool:
        return habit_name in self.load_day(day)

    def is_gym_exercise(self, name: str) -> bool:
        return self.classifier.is_gym_exercise(name)

    def monthly_stats(self, month: Any) -> MonthlyStats:
        """Counters for ``month`` (any day inside it), up to and including today."""
        first_day = coerce_date(month).replace(day=1)
        days_in_month = calendar.monthrange(first_day.year, first_day.month)[1]
        today = self._today()
        log = self.load_all()

        tally = _DayTally()
        for offset in range(days_in_month):
            current = first_day + datetime.timedelta(days=offset)
            if current > today:
                break
            tally.add(log.get(current, set()), self.is_gym_exercise)

        counts = tally.floored()
        return MonthlyStats(
            total_days=counts["counted"],
            completed_days=counts["completed"],
            gym_days=counts["gym"],
            habit_days=counts["habit"],
        )

    def weekly_stats(self, start_of_week: Any, log: CompletionLog | None = None) -> WeeklyStats:
        """Counters for the seven days from ``start_of_week``; pass ``log`` to reuse a read."""
        start = coerce_date(start_of_week)
        today = self._today()
        if log is None:
            log = self.load_all()

        tally = _DayTally()
        for offset in range(WEEK_LENGTH):
            current = start + datetime.timedelta(days=offset)
            if current > today:
                break
            tally.add(log.get(current, set()), self.is_gym_exercise)

        counts = tally.floored()
        return WeeklyStats(
            completed_days=counts["completed"],
            gym_days=counts["gym"],
            habit_days=counts["habit"],
            days_elapsed=counts["counted"],
        )

    def export_payload(self) -> Dict[str, List[str]]:
        return {day.isoformat(): sorted(names) for day, names in sorted(self.load_all().items())}

    def import_payload(self, raw: Any) -> int:
        """Write every day of a ``{"YYYY-MM-DD": [names]}`` payload; returns the day count."""
        parsed = parse_completion_payload(raw)
        for day, names in sorted(parsed.items()):
            self.record_completion(day, names)
        logger.info("Imported completions for %d days", len(parsed))
        return len(parsed)


class HabitProgressService:
    """Entry points used by the checklist and statistics screens."""

    def __init__(self, store: ProgressStore):
        self.store = store

    def save_habits_progress(self, day: Any, habits: Iterable[Mapping[str, Any]]) -> bool:
        completed = [
            str(habit.get("name", ""))
            for habit in habits
            if habit.get("completed") is True
        ]
        try:
            self.store.record_completion(day, completed)
        except StorageUnavailable:
            return False
        return True

    def get_habits_progress(self) -> Dict[str, List[str]]:
        return self.store.export_payload()

    def is_habit_completed_on_date(self, day: Any, name: str) -> bool:
        return self.store.is_completed(day, name)

    def get_monthly_stats(self, month: Any) -> Dict[str, int]:
        return self.store.monthly_stats(month).as_dict()

    def get_weekly_stats(self, start_of_week: Any) -> Dict[str, int]:
        return self.store.weekly_stats(start_of_week).as_dict()
