"""Error taxonomy shared by the storage and service layers."""


class HabitTrackerError(Exception):
    """Base class for Habit Tracker errors."""


class StorageUnavailable(HabitTrackerError):
    """The key-value backend could not be read or written."""


class MalformedPayload(HabitTrackerError):
    """Stored JSON did not parse or had the wrong shape."""
