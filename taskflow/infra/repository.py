from __future__ import annotations

import itertools
import logging
import threading
from collections import Counter
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from taskflow.domain import rules
from taskflow.domain.entities import (
    IMMUTABLE_TASK_FIELDS,
    REQUIRED_TASK_FIELDS,
    TASK_FIELDS,
    TaskEntity,
    TaskId,
    TaskWithSubtasks,
)
from taskflow.domain.enums import TaskStatus
from taskflow.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], TaskId]


def _counter_after(tasks: Iterable[TaskEntity]) -> IdFactory:
    numeric = [task.id for task in tasks if isinstance(task.id, int)]
    counter = itertools.count(max(numeric, default=0) + 1)
    return lambda: next(counter)


def normalize_status(value: object) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown task status: {value!r}", field="status") from exc


def check_fields(data: dict, required: bool = False) -> None:
    if required:
        missing = REQUIRED_TASK_FIELDS - set(data)
        if missing:
            raise ValidationError(f"Missing task fields: {', '.join(sorted(missing))}")
    unknown = set(data) - TASK_FIELDS
    if unknown:
        raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")
    frozen = set(data) & IMMUTABLE_TASK_FIELDS
    if frozen:
        raise ValidationError(f"Fields cannot be changed: {', '.join(sorted(frozen))}")


def prepare_fields(data: dict, required: bool = False) -> dict:
    check_fields(data, required=required)
    values = dict(data)
    if "status" in values:
        values["status"] = normalize_status(values["status"])
    if "description" in values and values["description"] is None:
        values["description"] = ""
    return values


class InMemoryTaskRepository:
    """Task collection held in a list, queried by linear scans.

    Stored records are frozen dataclasses, so handing them out never exposes
    mutable state; writes replace the record at its index. The lock makes
    every lookup-then-mutate sequence atomic across threads.
    """

    def __init__(
        self,
        tasks: Iterable[TaskEntity] = (),
        clock: Clock = datetime.now,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        self._tasks: list[TaskEntity] = list(tasks)
        self._clock = clock
        self._next_id = id_factory or _counter_after(self._tasks)
        self._lock = threading.RLock()

    def get_all(self) -> list[TaskEntity]:
        with self._lock:
            return list(self._tasks)

    def get_by_id(self, task_id: TaskId) -> TaskEntity | None:
        with self._lock:
            index = self._index_of(task_id)
            return self._tasks[index] if index is not None else None

    def create(self, data: dict) -> TaskEntity:
        with self._lock:
            return self._insert(data)

    def create_subtask(self, parent_id: TaskId, data: dict) -> TaskEntity:
        with self._lock:
            if self._index_of(parent_id) is None:
                raise NotFoundError("Task", parent_id)
            return self._insert({**data, "parent_task_id": parent_id})

    def update(self, task_id: TaskId, data: dict) -> TaskEntity:
        changes = prepare_fields(data)
        with self._lock:
            index = self._index_of(task_id)
            if index is None:
                raise NotFoundError("Task", task_id)
            updated = replace(self._tasks[index], **changes)
            self._tasks[index] = updated
        logger.info("Updated task id=%s fields=%s", task_id, sorted(changes))
        return updated

    def delete(self, task_id: TaskId) -> bool:
        with self._lock:
            index = self._index_of(task_id)
            if index is None:
                raise NotFoundError("Task", task_id)
            del self._tasks[index]
        logger.info("Deleted task id=%s", task_id)
        return True

    def get_by_category(self, category_id: TaskId) -> list[TaskEntity]:
        return self._select(lambda task: task.category_id == category_id)

    def get_by_status(self, status: str) -> list[TaskEntity]:
        return self._select(lambda task: task.status == status)

    def get_overdue(self) -> list[TaskEntity]:
        now = self._clock()
        return self._select(lambda task: rules.is_overdue(task, now))

    def get_due_today(self) -> list[TaskEntity]:
        now = self._clock()
        return self._select(lambda task: rules.is_due_today(task, now))

    def get_upcoming(self) -> list[TaskEntity]:
        now = self._clock()
        return self._select(lambda task: rules.is_upcoming(task, now))

    def get_parent_tasks(self) -> list[TaskEntity]:
        return self._select(lambda task: task.parent_task_id is None)

    def get_subtasks(self, parent_id: TaskId) -> list[TaskEntity]:
        return self._select(lambda task: task.parent_task_id == parent_id)

    def get_task_with_subtasks(self, task_id: TaskId) -> TaskWithSubtasks | None:
        with self._lock:
            task = self.get_by_id(task_id)
            if task is None:
                return None
            return TaskWithSubtasks.from_task(task, self.get_subtasks(task_id))

    def get_subtask_progress(self, parent_id: TaskId) -> dict[str, int]:
        subtasks = self.get_subtasks(parent_id)
        completed = sum(1 for task in subtasks if task.status == TaskStatus.COMPLETED)
        return rules.build_progress(len(subtasks), completed)

    def get_stats(self) -> dict[str, int]:
        now = self._clock()
        with self._lock:
            counts = Counter(task.status for task in self._tasks)
            overdue = sum(1 for task in self._tasks if rules.is_overdue(task, now))
        return rules.build_stats(counts, overdue)

    def _select(self, predicate: Callable[[TaskEntity], bool]) -> list[TaskEntity]:
        with self._lock:
            return [task for task in self._tasks if predicate(task)]

    def _index_of(self, task_id: TaskId) -> int | None:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        return None

    def _insert(self, data: dict) -> TaskEntity:
        values = prepare_fields(data, required=True)
        values.setdefault("status", TaskStatus.PENDING)
        task = TaskEntity(id=self._next_id(), created_at=self._clock(), **values)
        self._tasks.append(task)
        logger.info("Created task id=%s parent=%s", task.id, task.parent_task_id)
        return task
