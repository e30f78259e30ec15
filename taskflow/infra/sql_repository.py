from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import func, select

from taskflow.domain import rules
from taskflow.domain.entities import CategoryEntity, TaskEntity, TaskWithSubtasks
from taskflow.domain.enums import TaskStatus
from taskflow.domain.errors import NotFoundError

from .category_repository import check_category_fields
from .models import CategoryModel, TaskModel
from .repository import prepare_fields

logger = logging.getLogger(__name__)

STATUS_COMPLETED = TaskStatus.COMPLETED.value


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        description=model.description,
        category_id=model.category_id,
        due_date=model.due_date,
        reminder_time=model.reminder_time,
        status=TaskStatus(model.status),
        created_at=model.created_at,
        parent_task_id=model.parent_task_id,
    )


def _to_columns(data: dict, required: bool = False) -> dict:
    columns = prepare_fields(data, required=required)
    if "status" in columns:
        columns["status"] = columns["status"].value
    return columns


class SqlTaskRepository:
    """Same contract as the in-memory repository, backed by SQLAlchemy.

    Time windows are pushed into the WHERE clause; the bounds come from a
    single clock sample per call. Rows come back in primary-key order, which
    is insertion order.
    """

    def __init__(self, session_factory, clock: Callable[[], datetime] = datetime.now) -> None:
        self._sessions = session_factory
        self._clock = clock

    def get_all(self) -> list[TaskEntity]:
        return self._list(select(TaskModel))

    def get_by_id(self, task_id: int) -> Optional[TaskEntity]:
        with self._sessions() as session:
            task = session.get(TaskModel, task_id)
            return _to_entity(task) if task else None

    def create(self, data: dict) -> TaskEntity:
        with self._sessions() as session:
            return self._insert(session, data)

    def create_subtask(self, parent_id: int, data: dict) -> TaskEntity:
        with self._sessions() as session:
            if session.get(TaskModel, parent_id) is None:
                raise NotFoundError("Task", parent_id)
            return self._insert(session, {**data, "parent_task_id": parent_id})

    def update(self, task_id: int, data: dict) -> TaskEntity:
        columns = _to_columns(data)
        with self._sessions() as session:
            task = session.get(TaskModel, task_id, with_for_update=True)
            if not task:
                raise NotFoundError("Task", task_id)
            for key, value in columns.items():
                setattr(task, key, value)
            session.commit()
            session.refresh(task)
            logger.info("Updated task id=%s fields=%s", task_id, sorted(columns))
            return _to_entity(task)

    def delete(self, task_id: int) -> bool:
        with self._sessions() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                raise NotFoundError("Task", task_id)
            session.delete(task)
            session.commit()
        logger.info("Deleted task id=%s", task_id)
        return True

    def get_by_category(self, category_id: int) -> list[TaskEntity]:
        return self._list(select(TaskModel).where(TaskModel.category_id == category_id))

    def get_by_status(self, status: str) -> list[TaskEntity]:
        return self._list(select(TaskModel).where(TaskModel.status == str(status)))

    def get_overdue(self) -> list[TaskEntity]:
        now = self._clock()
        return self._list(
            select(TaskModel).where(
                TaskModel.status != STATUS_COMPLETED,
                TaskModel.due_date < now,
            )
        )

    def get_due_today(self) -> list[TaskEntity]:
        start, end = rules.day_bounds(self._clock())
        return self._list(
            select(TaskModel).where(TaskModel.due_date >= start, TaskModel.due_date < end)
        )

    def get_upcoming(self) -> list[TaskEntity]:
        now = self._clock()
        return self._list(
            select(TaskModel).where(
                TaskModel.due_date > now,
                TaskModel.due_date <= now + rules.UPCOMING_WINDOW,
                TaskModel.status != STATUS_COMPLETED,
            )
        )

    def get_parent_tasks(self) -> list[TaskEntity]:
        return self._list(select(TaskModel).where(TaskModel.parent_task_id.is_(None)))

    def get_subtasks(self, parent_id: int) -> list[TaskEntity]:
        return self._list(select(TaskModel).where(TaskModel.parent_task_id == parent_id))

    def get_task_with_subtasks(self, task_id: int) -> Optional[TaskWithSubtasks]:
        with self._sessions() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None
            stmt = (
                select(TaskModel)
                .where(TaskModel.parent_task_id == task_id)
                .order_by(TaskModel.id.asc())
            )
            subtasks = [_to_entity(row) for row in session.scalars(stmt)]
            return TaskWithSubtasks.from_task(_to_entity(task), subtasks)

    def get_subtask_progress(self, parent_id: int) -> dict[str, int]:
        with self._sessions() as session:
            base = select(func.count()).select_from(TaskModel).where(
                TaskModel.parent_task_id == parent_id
            )
            total = session.scalar(base) or 0
            completed = session.scalar(base.where(TaskModel.status == STATUS_COMPLETED)) or 0
        return rules.build_progress(total, completed)

    def get_stats(self) -> dict[str, int]:
        now = self._clock()
        with self._sessions() as session:
            rows = session.execute(
                select(TaskModel.status, func.count()).group_by(TaskModel.status)
            ).all()
            overdue = session.scalar(
                select(func.count())
                .select_from(TaskModel)
                .where(TaskModel.status != STATUS_COMPLETED, TaskModel.due_date < now)
            ) or 0
        return rules.build_stats({status: count for status, count in rows}, overdue)

    def _list(self, stmt) -> list[TaskEntity]:
        with self._sessions() as session:
            return [_to_entity(task) for task in session.scalars(stmt.order_by(TaskModel.id.asc()))]

    def _insert(self, session, data: dict) -> TaskEntity:
        columns = _to_columns(data, required=True)
        columns.setdefault("status", TaskStatus.PENDING.value)
        task = TaskModel(created_at=self._clock(), **columns)
        session.add(task)
        session.commit()
        session.refresh(task)
        logger.info("Created task id=%s parent=%s", task.id, task.parent_task_id)
        return _to_entity(task)


def _to_category(model: CategoryModel) -> CategoryEntity:
    return CategoryEntity(id=model.id, name=model.name, color=model.color)


class SqlCategoryRepository:
    def __init__(self, session_factory) -> None:
        self._sessions = session_factory

    def get_all(self) -> list[CategoryEntity]:
        with self._sessions() as session:
            stmt = select(CategoryModel).order_by(CategoryModel.id.asc())
            return [_to_category(row) for row in session.scalars(stmt)]

    def get_by_id(self, category_id: int) -> Optional[CategoryEntity]:
        with self._sessions() as session:
            category = session.get(CategoryModel, category_id)
            return _to_category(category) if category else None

    def create(self, data: dict) -> CategoryEntity:
        check_category_fields(data)
        with self._sessions() as session:
            category = CategoryModel(name=data["name"], color=data["color"])
            session.add(category)
            session.commit()
            session.refresh(category)
            logger.info("Created category id=%s name=%s", category.id, category.name)
            return _to_category(category)

    def update(self, category_id: int, data: dict) -> CategoryEntity:
        check_category_fields(data, partial=True)
        with self._sessions() as session:
            category = session.get(CategoryModel, category_id, with_for_update=True)
            if not category:
                raise NotFoundError("Category", category_id)
            for key, value in data.items():
                setattr(category, key, value)
            session.commit()
            session.refresh(category)
            return _to_category(category)

    def delete(self, category_id: int) -> bool:
        with self._sessions() as session:
            category = session.get(CategoryModel, category_id)
            if not category:
                raise NotFoundError("Category", category_id)
            session.delete(category)
            session.commit()
        logger.info("Deleted category id=%s", category_id)
        return True
