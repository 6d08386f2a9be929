"""Long-term goals and progress-bar ratios."""

from __future__ import annotations

import datetime
import math
from dataclasses import dataclass
from typing import Dict, List


def stat_ratio(value: float, total: float) -> float:
    """``value / total`` clamped to [0, 1]; 0.0 when undefined."""
    if not total or math.isnan(total) or math.isinf(total):
        return 0.0
    ratio = value / total
    if math.isnan(ratio) or math.isinf(ratio):
        return 0.0
    return max(0.0, min(ratio, 1.0))


@dataclass(frozen=True)
class LongTermGoal:
    name: str
    current: int
    target: int
    deadline: datetime.date
    icon: str = "flag"

    @property
    def progress(self) -> float:
        if self.target <= 0:
            return 0.0
        return stat_ratio(self.current, self.target)

    def as_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "current": self.current,
            "target": self.target,
            "deadline": self.deadline.isoformat(),
            "icon": self.icon,
            "progress": self.progress,
        }


DEFAULT_GOALS: List[LongTermGoal] = [
    LongTermGoal("Completar 100 días de gym", 68, 100, datetime.date(2025, 3, 31), "fitness_center"),
    LongTermGoal("Meditar 365 días seguidos", 45, 365, datetime.date(2025, 12, 31), "self_improvement"),
    LongTermGoal("Leer 24 libros este año", 14, 24, datetime.date(2025, 12, 31), "book"),
]


def list_goals() -> List[LongTermGoal]:
    return list(DEFAULT_GOALS)
