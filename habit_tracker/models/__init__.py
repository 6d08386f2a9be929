"""SQLModel exports for Habit Tracker."""

from .kv_models import KeyValueEntry, UTCDateTime, utc_now

__all__ = ["KeyValueEntry", "UTCDateTime", "utc_now"]
