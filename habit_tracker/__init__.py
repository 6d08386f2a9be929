"""Habit Tracker: daily checklists, completion history and statistics."""

__version__ = "0.1.0"
