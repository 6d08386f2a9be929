"""Monthly and weekly statistics routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from habit_tracker.core.db import get_db
from habit_tracker.services.classifier_service import GymExerciseClassifier
from habit_tracker.web import handlers as web_handlers
from habit_tracker.web.dependencies import Clock, get_classifier, get_clock

router = APIRouter()


@router.get("/api/stats/monthly", name="api_monthly_stats")
def api_monthly_stats(
    month: Optional[str] = None,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    classifier: GymExerciseClassifier = Depends(get_classifier),
):
    return web_handlers.api_monthly_stats(month, db, clock=clock, classifier=classifier)


@router.get("/api/stats/weekly", name="api_weekly_stats")
def api_weekly_stats(
    start: Optional[str] = None,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    classifier: GymExerciseClassifier = Depends(get_classifier),
):
    # Defaults to the Monday of the current week
    return web_handlers.api_weekly_stats(start, db, clock=clock, classifier=classifier)
