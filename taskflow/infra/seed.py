from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from taskflow.domain.entities import CategoryEntity, TaskEntity, UserPreferences
from taskflow.domain.enums import DefaultView, SortKey, TaskStatus, Theme

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = Path(__file__).resolve().parents[1] / "data" / "seed.json"


@dataclass(frozen=True)
class SeedData:
    tasks: list[TaskEntity] = field(default_factory=list)
    categories: list[CategoryEntity] = field(default_factory=list)
    preferences: UserPreferences = field(default_factory=UserPreferences)


def _parse_time(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _task(record: dict) -> TaskEntity:
    return TaskEntity(
        id=record["id"],
        title=record["title"],
        description=record.get("description", ""),
        category_id=record.get("category_id"),
        due_date=_parse_time(record["due_date"]),
        reminder_time=_parse_time(record.get("reminder_time")),
        status=TaskStatus(record.get("status", TaskStatus.PENDING)),
        created_at=_parse_time(record["created_at"]),
        parent_task_id=record.get("parent_task_id"),
    )


def _preferences(record: dict) -> UserPreferences:
    defaults = UserPreferences()
    return UserPreferences(
        default_view=DefaultView(record.get("default_view", defaults.default_view)),
        sort_order=SortKey(record.get("sort_order", defaults.sort_order)),
        theme=Theme(record.get("theme", defaults.theme)),
        show_completed_tasks=bool(record.get("show_completed_tasks", defaults.show_completed_tasks)),
        notifications_enabled=bool(record.get("notifications_enabled", defaults.notifications_enabled)),
        reminder_offset=int(record.get("reminder_offset", defaults.reminder_offset)),
    )


def load_seed(path: Path | None = None) -> SeedData:
    seed_path = path or DEFAULT_SEED_PATH
    payload = json.loads(seed_path.read_text(encoding="utf-8"))
    seed = SeedData(
        tasks=[_task(record) for record in payload.get("tasks", [])],
        categories=[CategoryEntity(**record) for record in payload.get("categories", [])],
        preferences=_preferences(payload.get("preferences", {})),
    )
    logger.info(
        "Loaded seed %s tasks=%s categories=%s",
        seed_path,
        len(seed.tasks),
        len(seed.categories),
    )
    return seed
