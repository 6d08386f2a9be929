"""HTTP handler implementations used by the routers."""

from __future__ import annotations

import datetime
from typing import Any, Dict, List

from dateutil.relativedelta import MO, relativedelta
from fastapi import HTTPException, Request
from sqlmodel import Session

from habit_tracker.services.classifier_service import GymExerciseClassifier
from habit_tracker.services.goal_service import list_goals, stat_ratio
from habit_tracker.services.kv_store import KeyValueStore
from habit_tracker.services.progress_service import (
    WEEK_LENGTH,
    HabitProgressService,
    ProgressStore,
    coerce_date,
)
from habit_tracker.services.routine_service import (
    build_daily_checklist,
    completion_summary,
    routine_title,
)
from habit_tracker.services.theme_service import ThemeController, ThemeMode


def _parse_date(date_str: str) -> datetime.date:
    try:
        return coerce_date(date_str)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")


def _parse_month(month_str: str | None, today: datetime.date) -> datetime.date:
    if not month_str:
        return today.replace(day=1)
    try:
        return datetime.datetime.strptime(month_str.strip(), "%Y-%m").date()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid month format")


def _progress_service(db: Session, clock, classifier: GymExerciseClassifier | None = None) -> HabitProgressService:
    return HabitProgressService(ProgressStore(KeyValueStore(db), classifier=classifier, clock=clock))


async def _json_object(request: Request) -> Dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="body must be an object")
    return payload


def api_progress(db: Session, *, clock):
    return _progress_service(db, clock).get_habits_progress()


def api_progress_day(date_str: str, db: Session, *, clock):
    date_obj = _parse_date(date_str)
    completed = _progress_service(db, clock).store.load_day(date_obj)
    return {"date": date_obj.isoformat(), "completed": sorted(completed)}


async def save_progress_day(request: Request, date_str: str, db: Session, *, clock):
    date_obj = _parse_date(date_str)
    payload = await _json_object(request)
    habits = payload.get("habits")
    if not isinstance(habits, list) or not all(isinstance(item, dict) for item in habits):
        raise HTTPException(status_code=400, detail="habits must be a list of objects")

    if not _progress_service(db, clock).save_habits_progress(date_obj, habits):
        raise HTTPException(status_code=503, detail="Progress could not be saved")
    return {"saved": True, "date": date_obj.isoformat()}


def api_habit_completed(date_str: str, name: str, db: Session, *, clock):
    date_obj = _parse_date(date_str)
    completed = _progress_service(db, clock).is_habit_completed_on_date(date_obj, name)
    return {"date": date_obj.isoformat(), "name": name, "completed": completed}


def api_monthly_stats(month_str: str | None, db: Session, *, clock, classifier):
    month = _parse_month(month_str, coerce_date(clock()))
    stats = _progress_service(db, clock, classifier).store.monthly_stats(month)

    payload: Dict[str, Any] = {"month": month.strftime("%Y-%m"), **stats.as_dict()}
    payload["ratios"] = {
        "completedDays": stat_ratio(stats.completed_days, stats.total_days),
        "gymDays": stat_ratio(stats.gym_days, stats.total_days),
        "habitDays": stat_ratio(stats.habit_days, stats.total_days),
    }
    return payload


def api_weekly_stats(start_str: str | None, db: Session, *, clock, classifier):
    if start_str:
        start = _parse_date(start_str)
    else:
        start = coerce_date(clock()) + relativedelta(weekday=MO(-1))
    store = _progress_service(db, clock, classifier).store
    log = store.load_all()
    stats = store.weekly_stats(start, log=log)
    today = coerce_date(clock())

    days: List[Dict[str, Any]] = []
    for offset in range(WEEK_LENGTH):
        current = start + datetime.timedelta(days=offset)
        completed = current <= today and bool(log.get(current))
        days.append({"date": current.isoformat(), "completed": completed})

    payload: Dict[str, Any] = {"start": start.isoformat(), **stats.as_dict()}
    payload["daysElapsed"] = stats.days_elapsed
    payload["ratios"] = {
        "completedDays": stats.ratio("completed_days"),
        "gymDays": stats.ratio("gym_days"),
        "habitDays": stats.ratio("habit_days"),
    }
    payload["days"] = days
    return payload


def api_checklist(date_str: str, custom_names: List[str], db: Session, *, clock):
    date_obj = _parse_date(date_str)
    completed = _progress_service(db, clock).store.load_day(date_obj)
    entries = build_daily_checklist(date_obj, completed, custom_names)
    return {
        "date": date_obj.isoformat(),
        "title": routine_title(date_obj),
        "habits": [entry.as_dict() for entry in entries],
        **completion_summary(entries),
    }


def api_goals():
    return {"goals": [goal.as_dict() for goal in list_goals()]}


def api_theme(controller: ThemeController):
    return controller.settings.as_dict()


async def save_theme(request: Request, controller: ThemeController):
    payload = await _json_object(request)
    mode = payload.get("mode", int(controller.settings.mode))
    color = payload.get("color", controller.settings.seed_color)
    if isinstance(mode, bool) or not isinstance(mode, int) or mode not in {item.value for item in ThemeMode}:
        raise HTTPException(status_code=400, detail="mode must be 0, 1 or 2")
    try:
        saved = controller.update(mode, color)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"saved": saved, **controller.settings.as_dict()}


def api_classify(name: str, classifier: GymExerciseClassifier):
    return {"name": name, "is_gym_exercise": classifier.is_gym_exercise(name)}
