from __future__ import annotations

from enum import StrEnum


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class SortKey(StrEnum):
    DUE_DATE = "due_date"
    TITLE = "title"
    STATUS = "status"
    CREATED_AT = "created_at"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


class DefaultView(StrEnum):
    DASHBOARD = "dashboard"
    TASKS = "tasks"
    CATEGORIES = "categories"
