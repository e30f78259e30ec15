"""Classification and aggregation rules shared by every repository backend.

All times are naive local datetimes. Callers sample "now" once per query and
pass it in so a single query never sees two different clock readings.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Mapping

from .entities import TaskEntity
from .enums import TaskStatus

UPCOMING_WINDOW = timedelta(days=7)


def day_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def is_overdue(task: TaskEntity, now: datetime) -> bool:
    return task.status != TaskStatus.COMPLETED and task.due_date < now


def is_due_today(task: TaskEntity, now: datetime) -> bool:
    start, end = day_bounds(now)
    return start <= task.due_date < end


def is_upcoming(task: TaskEntity, now: datetime) -> bool:
    return (
        now < task.due_date <= now + UPCOMING_WINDOW
        and task.status != TaskStatus.COMPLETED
    )


def percentage(part: int, total: int) -> int:
    """Whole percent of part/total, halves rounded up; 0 for an empty total."""
    if total <= 0:
        return 0
    return math.floor(part / total * 100 + 0.5)


def build_stats(counts: Mapping[str, int], overdue: int) -> dict[str, int]:
    """Dashboard figures from per-status counts and the overdue count."""
    completed = counts.get(TaskStatus.COMPLETED, 0)
    pending = counts.get(TaskStatus.PENDING, 0)
    in_progress = counts.get(TaskStatus.IN_PROGRESS, 0)
    total = sum(counts.values())
    return {
        "total": total,
        "completed": completed,
        "pending": pending,
        "in_progress": in_progress,
        "overdue": overdue,
        "completion_rate": percentage(completed, total),
    }


def build_progress(total: int, completed: int) -> dict[str, int]:
    return {
        "total": total,
        "completed": completed,
        "percentage": percentage(completed, total),
    }
