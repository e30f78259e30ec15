from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import SortKey


@dataclass(frozen=True)
class TaskFilters:
    search: str | None = None
    category_id: int | str | None = None
    status: str = "all"
    sort_by: SortKey = SortKey.DUE_DATE
    limit: Optional[int] = None
    parents_only: bool = True
