"""Service-layer exports."""

from .classifier_service import DEFAULT_GYM_KEYWORDS, GymExerciseClassifier, build_classifier, is_gym_exercise
from .goal_service import LongTermGoal, list_goals, stat_ratio
from .kv_store import KeyValueStore
from .progress_service import (
    HabitProgressService,
    MonthlyStats,
    ProgressStore,
    WeeklyStats,
    coerce_date,
    parse_completion_payload,
)
from .routine_service import HabitEntry, build_daily_checklist, routine_title
from .theme_service import ThemeController, ThemeMode, ThemeSettings, ThemeSettingsStore

__all__ = [
    "DEFAULT_GYM_KEYWORDS",
    "GymExerciseClassifier",
    "build_classifier",
    "is_gym_exercise",
    "LongTermGoal",
    "list_goals",
    "stat_ratio",
    "KeyValueStore",
    "HabitProgressService",
    "MonthlyStats",
    "ProgressStore",
    "WeeklyStats",
    "coerce_date",
    "parse_completion_payload",
    "HabitEntry",
    "build_daily_checklist",
    "routine_title",
    "ThemeController",
    "ThemeMode",
    "ThemeSettings",
    "ThemeSettingsStore",
]
