"""Daily checklist, goals and classifier routes."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from habit_tracker.core.db import get_db
from habit_tracker.services.classifier_service import GymExerciseClassifier
from habit_tracker.web import handlers as web_handlers
from habit_tracker.web.dependencies import Clock, get_classifier, get_clock

router = APIRouter()


@router.get("/api/checklist/{date_str}", name="api_checklist")
def api_checklist(
    date_str: str,
    custom: List[str] = Query(default=[]),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return web_handlers.api_checklist(date_str, custom, db, clock=clock)


@router.get("/api/goals", name="api_goals")
def api_goals():
    return web_handlers.api_goals()


@router.get("/api/classify", name="api_classify")
def api_classify(name: str, classifier: GymExerciseClassifier = Depends(get_classifier)):
    return web_handlers.api_classify(name, classifier)
