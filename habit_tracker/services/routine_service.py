"""Weekly gym routine and daily checklist services."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set

HABIT = "habit"
EXERCISE = "exercise"
CUSTOM = "custom"
CATEGORIES = (HABIT, EXERCISE, CUSTOM)

DEFAULT_ROUTINE_TITLE = "Rutina del día"

BASE_HABITS = (
    "Beber 8 vasos de agua",
    "Meditar 10 minutos",
    "Leer 20 páginas",
)


@dataclass(frozen=True)
class DayRoutine:
    title: str
    exercises: tuple = field(default_factory=tuple)


# ISO weekday (1=Mon ... 7=Sun)
GYM_ROUTINES: Dict[int, DayRoutine] = {
    1: DayRoutine(
        "Día 1: Pecho, Hombro y Trícep",
        ("Press banca", "Press inclinado", "Aperturas", "Hombro lateral", "Trícep"),
    ),
    2: DayRoutine(
        "Día 2: Espalda y Bícep",
        (
            "Remo en barra o mancuerna",
            "Jalón al pecho",
            "Máquina de remo",
            "Bícep con mancuerna",
            "Bícep en máquina",
        ),
    ),
    3: DayRoutine(
        "Día 3: Pierna",
        ("Sentadilla", "Extensión del cuádricep", "Máquina de femoral", "Aductor", "Gemelo"),
    ),
    4: DayRoutine(
        "Día 4: Pecho y Espalda",
        (
            "Press inclinado",
            "Press banca",
            "Aperturas",
            "Remo barra o mancuerna",
            "Jalón al pecho",
            "Máquina de remo",
        ),
    ),
    5: DayRoutine(
        "Día 5: Brazo",
        (
            "Press militar",
            "Hombro lateral",
            "Bícep martillo mancuerna",
            "Bícep máquina",
            "Trícep en polea alta",
            "Trícep en polea baja",
        ),
    ),
    6: DayRoutine(
        "Día 6: Pierna (Opcional)",
        ("Sentadilla", "Extensión del cuádricep", "Máquina de femoral", "Aductor", "Gemelo"),
    ),
    7: DayRoutine(
        "Día de Descanso",
        ("Descanso activo - Caminar", "Estiramientos", "Movilidad articular"),
    ),
}


@dataclass
class HabitEntry:
    name: str
    completed: bool = False
    category: str = HABIT

    def __post_init__(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValueError("habit name must not be empty")
        if self.category not in CATEGORIES:
            raise ValueError(f"unknown habit category: {self.category}")

    def as_dict(self) -> Dict[str, object]:
        # "type" is the key the checklist screens read
        return {"name": self.name, "completed": self.completed, "type": self.category}


def get_day_routine(day: datetime.date) -> DayRoutine | None:
    return GYM_ROUTINES.get(day.isoweekday())


def routine_title(day: datetime.date) -> str:
    routine = get_day_routine(day)
    return routine.title if routine else DEFAULT_ROUTINE_TITLE


def build_daily_checklist(
    day: datetime.date,
    completed_names: Iterable[str] = (),
    custom_names: Iterable[str] = (),
) -> List[HabitEntry]:
    """Base habits, then the weekday's exercises, then custom habits.

    Later entries whose name is already on the list are dropped, so a
    custom habit cannot shadow a base habit or an exercise.
    """
    completed: Set[str] = set(completed_names)
    routine = get_day_routine(day)
    candidates = [(name, HABIT) for name in BASE_HABITS]
    if routine:
        candidates.extend((name, EXERCISE) for name in routine.exercises)
    candidates.extend((name, CUSTOM) for name in custom_names if name and name.strip())

    entries: List[HabitEntry] = []
    seen: Set[str] = set()
    for name, category in candidates:
        entry = HabitEntry(name=name, category=category)
        if entry.name in seen:
            continue
        seen.add(entry.name)
        entry.completed = entry.name in completed
        entries.append(entry)
    return entries


def completion_summary(entries: List[HabitEntry]) -> Dict[str, int]:
    done = sum(1 for entry in entries if entry.completed)
    return {"completed": done, "total": len(entries)}
