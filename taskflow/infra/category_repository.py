from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import replace
from typing import Iterable

from taskflow.domain.entities import CategoryEntity, TaskId
from taskflow.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = frozenset({"name", "color"})


def check_category_fields(data: dict, partial: bool = False) -> None:
    unknown = set(data) - CATEGORY_FIELDS
    if unknown:
        raise ValidationError(f"Unknown category fields: {', '.join(sorted(unknown))}")
    if not partial and CATEGORY_FIELDS - set(data):
        raise ValidationError("Category needs a name and a color")


class InMemoryCategoryRepository:
    def __init__(self, categories: Iterable[CategoryEntity] = ()) -> None:
        self._categories: list[CategoryEntity] = list(categories)
        numeric = [c.id for c in self._categories if isinstance(c.id, int)]
        self._ids = itertools.count(max(numeric, default=0) + 1)
        self._lock = threading.RLock()

    def get_all(self) -> list[CategoryEntity]:
        with self._lock:
            return list(self._categories)

    def get_by_id(self, category_id: TaskId) -> CategoryEntity | None:
        with self._lock:
            return next((c for c in self._categories if c.id == category_id), None)

    def create(self, data: dict) -> CategoryEntity:
        check_category_fields(data)
        with self._lock:
            category = CategoryEntity(id=next(self._ids), name=data["name"], color=data["color"])
            self._categories.append(category)
        logger.info("Created category id=%s name=%s", category.id, category.name)
        return category

    def update(self, category_id: TaskId, data: dict) -> CategoryEntity:
        check_category_fields(data, partial=True)
        with self._lock:
            for index, category in enumerate(self._categories):
                if category.id == category_id:
                    updated = replace(category, **data)
                    self._categories[index] = updated
                    return updated
        raise NotFoundError("Category", category_id)

    def delete(self, category_id: TaskId) -> bool:
        with self._lock:
            before = len(self._categories)
            self._categories = [c for c in self._categories if c.id != category_id]
            if len(self._categories) == before:
                raise NotFoundError("Category", category_id)
        logger.info("Deleted category id=%s", category_id)
        return True
