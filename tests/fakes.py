from __future__ import annotations

from datetime import datetime, timedelta

NOW = datetime(2026, 10, 19, 12, 0)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


def task_data(title: str = "Task", due_in: timedelta = timedelta(days=2), **extra) -> dict:
    data = {"title": title, "category_id": 1, "due_date": NOW + due_in}
    data.update(extra)
    return data
