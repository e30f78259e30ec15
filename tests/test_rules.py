from __future__ import annotations

from datetime import datetime

import pytest

from taskflow.domain import rules


@pytest.mark.parametrize(
    ("part", "total", "expected"),
    [
        (0, 0, 0),
        (0, 3, 0),
        (1, 2, 50),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),
        (3, 8, 38),
        (5, 5, 100),
    ],
)
def test_percentage(part: int, total: int, expected: int) -> None:
    assert rules.percentage(part, total) == expected


def test_day_bounds() -> None:
    start, end = rules.day_bounds(datetime(2026, 12, 31, 23, 59, 59, 999))

    assert start == datetime(2026, 12, 31)
    assert end == datetime(2027, 1, 1)


def test_build_stats_accepts_plain_status_strings() -> None:
    stats = rules.build_stats({"completed": 3, "pending": 1}, overdue=1)

    assert stats["total"] == 4
    assert stats["completed"] == 3
    assert stats["in_progress"] == 0
    assert stats["completion_rate"] == 75
