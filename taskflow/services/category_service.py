from __future__ import annotations

import re
from typing import Protocol

from taskflow.domain.entities import CategoryEntity, TaskId
from taskflow.domain.errors import ValidationError

DEFAULT_COLOR = "#5B21B6"
_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


class CategoryRepository(Protocol):
    def get_all(self) -> list[CategoryEntity]: ...
    def get_by_id(self, category_id: TaskId) -> CategoryEntity | None: ...
    def create(self, data: dict) -> CategoryEntity: ...
    def update(self, category_id: TaskId, data: dict) -> CategoryEntity: ...
    def delete(self, category_id: TaskId) -> bool: ...


class CategoryService:
    def __init__(self, repo: CategoryRepository) -> None:
        self._repo = repo

    def list_categories(self) -> list[CategoryEntity]:
        return self._repo.get_all()

    def get_category(self, category_id: TaskId) -> CategoryEntity | None:
        return self._repo.get_by_id(category_id)

    def create_category(self, data: dict) -> CategoryEntity:
        normalized = {"color": DEFAULT_COLOR, **data}
        return self._repo.create(self._validate(normalized))

    def update_category(self, category_id: TaskId, data: dict) -> CategoryEntity:
        return self._repo.update(category_id, self._validate(data))

    def delete_category(self, category_id: TaskId) -> bool:
        return self._repo.delete(category_id)

    @staticmethod
    def _validate(data: dict) -> dict:
        normalized = dict(data)
        if "name" in normalized:
            name = (normalized["name"] or "").strip()
            if not name:
                raise ValidationError("Category name is required", field="name")
            normalized["name"] = name
        if "color" in normalized and not _COLOR_RE.match(normalized["color"] or ""):
            raise ValidationError("Category color must look like #RRGGBB", field="color")
        return normalized
