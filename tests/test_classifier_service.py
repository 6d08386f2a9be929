import pytest

from habit_tracker.services.classifier_service import (
    DEFAULT_GYM_KEYWORDS,
    GymExerciseClassifier,
    build_classifier,
    default_classifier,
    is_gym_exercise,
)


@pytest.mark.parametrize(
    "name",
    ["Press banca", "PRESS MILITAR", "Sentadilla", "Trícep en polea alta", "Máquina de femoral"],
)
def test_gym_exercise_names_match(name):
    assert is_gym_exercise(name) is True


@pytest.mark.parametrize(
    "name",
    ["Meditar 10 minutos", "Beber 8 vasos de agua", "Leer 20 páginas", "Estiramientos", ""],
)
def test_general_habits_do_not_match(name):
    assert is_gym_exercise(name) is False


def test_accents_are_not_folded():
    # "Jalón" keeps its accent, so the "jalon" keyword misses it
    assert is_gym_exercise("Jalón al pecho") is False
    assert is_gym_exercise("Jalon al pecho") is True


def test_substring_heuristic_can_misfire_on_custom_habits():
    assert is_gym_exercise("Remodelar el cuarto") is True


def test_injected_keywords_replace_the_default_list():
    classifier = GymExerciseClassifier(["Squat", " deadlift ", ""])

    assert classifier.keywords == ("squat", "deadlift")
    assert classifier("Back SQUAT") is True
    assert classifier.is_gym_exercise("Press banca") is False


def test_empty_keyword_list_never_matches():
    assert GymExerciseClassifier([]).is_gym_exercise("Press banca") is False


def test_build_classifier_reads_environment_override(monkeypatch):
    monkeypatch.setenv("HABITS_GYM_KEYWORDS", "yoga, pilates")
    classifier = build_classifier()

    assert classifier.keywords == ("yoga", "pilates")
    assert classifier.is_gym_exercise("Clase de Yoga") is True


def test_build_classifier_without_override_uses_default(monkeypatch):
    monkeypatch.delenv("HABITS_GYM_KEYWORDS", raising=False)

    assert build_classifier() is default_classifier
    assert default_classifier.keywords == DEFAULT_GYM_KEYWORDS
