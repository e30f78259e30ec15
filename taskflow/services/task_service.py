from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from typing import Protocol

from taskflow.domain.entities import CategoryEntity, TaskEntity, TaskId, TaskWithSubtasks
from taskflow.domain.enums import SortKey, TaskStatus
from taskflow.domain.errors import NotFoundError, ValidationError
from taskflow.domain.filters import TaskFilters
from taskflow.infra.repository import normalize_status

logger = logging.getLogger(__name__)


class TaskRepository(Protocol):
    def get_all(self) -> list[TaskEntity]: ...
    def get_by_id(self, task_id: TaskId) -> TaskEntity | None: ...
    def create(self, data: dict) -> TaskEntity: ...
    def create_subtask(self, parent_id: TaskId, data: dict) -> TaskEntity: ...
    def update(self, task_id: TaskId, data: dict) -> TaskEntity: ...
    def delete(self, task_id: TaskId) -> bool: ...
    def get_overdue(self) -> list[TaskEntity]: ...
    def get_due_today(self) -> list[TaskEntity]: ...
    def get_upcoming(self) -> list[TaskEntity]: ...
    def get_subtasks(self, parent_id: TaskId) -> list[TaskEntity]: ...
    def get_task_with_subtasks(self, task_id: TaskId) -> TaskWithSubtasks | None: ...
    def get_subtask_progress(self, parent_id: TaskId) -> dict[str, int]: ...
    def get_stats(self) -> dict[str, int]: ...


class CategoryLookup(Protocol):
    def get_all(self) -> list[CategoryEntity]: ...


def _sort_key(sort_by: SortKey):
    if sort_by == SortKey.TITLE:
        return lambda task: task.title.casefold()
    if sort_by == SortKey.STATUS:
        return lambda task: str(task.status)
    if sort_by == SortKey.CREATED_AT:
        return lambda task: task.created_at
    return lambda task: task.due_date


class TaskService:
    def __init__(self, repo: TaskRepository, categories: CategoryLookup | None = None) -> None:
        self._repo = repo
        self._categories = categories

    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        tasks = self._repo.get_all()
        if filters.parents_only:
            tasks = [task for task in tasks if task.parent_task_id is None]
        if filters.search:
            needle = filters.search.casefold()
            tasks = [
                task for task in tasks
                if needle in task.title.casefold() or needle in (task.description or "").casefold()
            ]
        if filters.category_id is not None:
            tasks = [task for task in tasks if task.category_id == filters.category_id]
        if filters.status != "all":
            tasks = [task for task in tasks if task.status == filters.status]

        sort_by = SortKey(filters.sort_by)
        tasks.sort(key=_sort_key(sort_by), reverse=sort_by == SortKey.CREATED_AT)

        if filters.limit:
            tasks = tasks[: filters.limit]
        return tasks

    def get_task(self, task_id: TaskId) -> TaskEntity | None:
        return self._repo.get_by_id(task_id)

    def get_task_with_subtasks(self, task_id: TaskId) -> TaskWithSubtasks | None:
        return self._repo.get_task_with_subtasks(task_id)

    def create_task(self, data: dict) -> TaskEntity:
        normalized = self._validate(data, partial=False)
        return self._repo.create(normalized)

    def create_subtask(self, parent_id: TaskId, data: dict) -> TaskEntity:
        parent = self._repo.get_by_id(parent_id)
        if parent is None:
            raise NotFoundError("Task", parent_id)
        if parent.is_subtask:
            raise ValidationError("Subtasks cannot have subtasks of their own", field="parent_task_id")
        normalized = self._validate(data, partial=False)
        return self._repo.create_subtask(parent_id, normalized)

    def update_task(self, task_id: TaskId, data: dict) -> TaskEntity:
        return self._repo.update(task_id, self._validate(data, partial=True))

    def toggle_complete(self, task_id: TaskId) -> TaskEntity:
        task = self._repo.get_by_id(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        if task.status == TaskStatus.COMPLETED:
            new_status = TaskStatus.PENDING
        else:
            new_status = TaskStatus.COMPLETED
        return self._repo.update(task_id, {"status": new_status})

    def delete_task(self, task_id: TaskId, cascade: bool = False) -> bool:
        if cascade:
            for subtask in self._repo.get_subtasks(task_id):
                self._repo.delete(subtask.id)
        return self._repo.delete(task_id)

    def get_overdue(self) -> list[TaskEntity]:
        return self._repo.get_overdue()

    def get_due_today(self) -> list[TaskEntity]:
        return self._repo.get_due_today()

    def get_upcoming(self) -> list[TaskEntity]:
        return self._repo.get_upcoming()

    def get_subtask_progress(self, parent_id: TaskId) -> dict[str, int]:
        return self._repo.get_subtask_progress(parent_id)

    def get_stats(self) -> dict[str, int]:
        return self._repo.get_stats()

    def with_categories(
        self, tasks: list[TaskEntity]
    ) -> list[tuple[TaskEntity, CategoryEntity | None]]:
        """Pair each task with its category; dangling references pair with None."""
        lookup = {}
        if self._categories is not None:
            lookup = {category.id: category for category in self._categories.get_all()}
        return [(task, lookup.get(task.category_id)) for task in tasks]

    def category_counts(self) -> dict[TaskId, int]:
        """Tasks per category id, subtasks included; dangling ids are counted too."""
        return dict(Counter(task.category_id for task in self._repo.get_all()))

    def categories_with_counts(self) -> list[tuple[CategoryEntity, int]]:
        if self._categories is None:
            return []
        counts = self.category_counts()
        return [(category, counts.get(category.id, 0)) for category in self._categories.get_all()]

    def _validate(self, data: dict, partial: bool) -> dict:
        normalized = dict(data)
        if "title" in normalized or not partial:
            title = (normalized.get("title") or "").strip()
            if not title:
                logger.warning("Rejected task without a title")
                raise ValidationError("Task title is required", field="title")
            normalized["title"] = title
        for key in ("category_id", "due_date"):
            if (key in normalized or not partial) and normalized.get(key) is None:
                logger.warning("Rejected task without %s", key)
                raise ValidationError(f"Task {key} is required", field=key)
        if "due_date" in normalized and not isinstance(normalized["due_date"], datetime):
            raise ValidationError("Task due_date must be a datetime", field="due_date")
        if "status" in normalized:
            normalized["status"] = normalize_status(normalized["status"])
        return normalized
