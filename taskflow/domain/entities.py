from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Optional, Union

from .enums import DefaultView, SortKey, TaskStatus, Theme

TaskId = Union[int, str]


@dataclass(frozen=True)
class TaskEntity:
    id: TaskId
    title: str
    category_id: TaskId | None
    due_date: datetime
    created_at: datetime
    description: str = ""
    reminder_time: Optional[datetime] = None
    status: TaskStatus = TaskStatus.PENDING
    parent_task_id: TaskId | None = None

    @property
    def is_subtask(self) -> bool:
        return self.parent_task_id is not None


@dataclass(frozen=True)
class TaskWithSubtasks(TaskEntity):
    subtasks: tuple[TaskEntity, ...] = ()

    @classmethod
    def from_task(cls, task: TaskEntity, subtasks: list[TaskEntity]) -> TaskWithSubtasks:
        values = {field.name: getattr(task, field.name) for field in fields(TaskEntity)}
        return cls(**values, subtasks=tuple(subtasks))


@dataclass(frozen=True)
class CategoryEntity:
    id: TaskId
    name: str
    color: str


@dataclass(frozen=True)
class UserPreferences:
    default_view: DefaultView = DefaultView.DASHBOARD
    sort_order: SortKey = SortKey.DUE_DATE
    theme: Theme = Theme.LIGHT
    show_completed_tasks: bool = True
    notifications_enabled: bool = True
    reminder_offset: int = 60


TASK_FIELDS = frozenset(field.name for field in fields(TaskEntity))
IMMUTABLE_TASK_FIELDS = frozenset({"id", "created_at"})
REQUIRED_TASK_FIELDS = frozenset({"title", "category_id", "due_date"})
