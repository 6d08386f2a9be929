"""FastAPI dependency providers shared by the routers."""

from __future__ import annotations

import datetime
from typing import Callable

from fastapi import Request

from habit_tracker.services.classifier_service import GymExerciseClassifier, build_classifier
from habit_tracker.services.theme_service import ThemeController

Clock = Callable[[], datetime.datetime]


def get_clock() -> Clock:
    return datetime.datetime.now


def get_classifier() -> GymExerciseClassifier:
    return build_classifier()


def get_theme_controller(request: Request) -> ThemeController:
    # Created once in create_app and shared by every request
    return request.app.state.theme
