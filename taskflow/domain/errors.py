from __future__ import annotations


class TaskFlowError(Exception):
    pass


class NotFoundError(TaskFlowError):
    def __init__(self, kind: str, item_id: object) -> None:
        super().__init__(f"{kind} not found: {item_id!r}")
        self.kind = kind
        self.item_id = item_id


class ValidationError(TaskFlowError):
    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
