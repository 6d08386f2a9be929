"""Keyword classifier that tells gym exercises apart from other habits."""

from __future__ import annotations

from typing import Iterable, Tuple

from habit_tracker.core.config import get_gym_keywords

# Spanish stems of the exercises in the weekly routine
DEFAULT_GYM_KEYWORDS: Tuple[str, ...] = (
    "press",
    "remo",
    "jalon",
    "sentadilla",
    "extension",
    "femoral",
    "aductor",
    "gemelo",
    "apertura",
    "hombro",
    "tricep",
    "bicep",
    "militar",
    "martillo",
    "polea",
)


class GymExerciseClassifier:
    """Case-insensitive substring match against a keyword list.

    This is a heuristic. A custom habit such as "Remodelar el cuarto" counts
    as gym because it contains "remo", and accented names ("Jalón") do not
    match their unaccented keyword.
    """

    def __init__(self, keywords: Iterable[str] | None = None):
        source = DEFAULT_GYM_KEYWORDS if keywords is None else keywords
        self.keywords: Tuple[str, ...] = tuple(
            keyword.strip().lower() for keyword in source if keyword and keyword.strip()
        )

    def is_gym_exercise(self, name: str) -> bool:
        lowered = (name or "").lower()
        return any(keyword in lowered for keyword in self.keywords)

    __call__ = is_gym_exercise


default_classifier = GymExerciseClassifier()


def is_gym_exercise(name: str) -> bool:
    return default_classifier.is_gym_exercise(name)


def build_classifier(keywords: Iterable[str] | None = None) -> GymExerciseClassifier:
    """Classifier for the application, honouring HABITS_GYM_KEYWORDS when set."""
    if keywords is None:
        keywords = get_gym_keywords()
    if keywords is None:
        return default_classifier
    return GymExerciseClassifier(keywords)
