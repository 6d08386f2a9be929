"""Completion log routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from habit_tracker.core.db import get_db
from habit_tracker.web import handlers as web_handlers
from habit_tracker.web.dependencies import Clock, get_clock

router = APIRouter()


@router.get("/api/progress", name="api_progress")
def api_progress(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)):
    return web_handlers.api_progress(db, clock=clock)


@router.get("/api/progress/{date_str}", name="api_progress_day")
def api_progress_day(date_str: str, db: Session = Depends(get_db), clock: Clock = Depends(get_clock)):
    return web_handlers.api_progress_day(date_str, db, clock=clock)


@router.put("/api/progress/{date_str}", name="save_progress_day")
async def save_progress_day(
    request: Request,
    date_str: str,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    # Full replacement of the day's completed set
    return await web_handlers.save_progress_day(request, date_str, db, clock=clock)


@router.get("/api/progress/{date_str}/habits/{name}", name="api_habit_completed")
def api_habit_completed(
    date_str: str,
    name: str,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return web_handlers.api_habit_completed(date_str, name, db, clock=clock)
