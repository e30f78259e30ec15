from __future__ import annotations

import dataclasses
import threading
import uuid

import pytest

from taskflow.domain.entities import TaskEntity
from taskflow.domain.enums import TaskStatus
from taskflow.infra.repository import InMemoryTaskRepository

from .fakes import NOW, task_data


def test_reads_cannot_mutate_stored_records(memory_repo) -> None:
    task = memory_repo.create(task_data("Original"))

    with pytest.raises(dataclasses.FrozenInstanceError):
        task.title = "Changed"  # type: ignore[misc]
    memory_repo.get_all().clear()

    assert memory_repo.get_by_id(task.id).title == "Original"


def test_ids_continue_after_seed_data(clock) -> None:
    seeded = TaskEntity(id=41, title="Seeded", category_id=1, due_date=NOW, created_at=NOW)
    repo = InMemoryTaskRepository([seeded], clock=clock)

    assert repo.create(task_data()).id == 42


def test_injected_id_factory(clock) -> None:
    repo = InMemoryTaskRepository(clock=clock, id_factory=lambda: uuid.uuid4().hex)

    task = repo.create(task_data())

    assert isinstance(task.id, str)
    assert repo.get_by_id(task.id) == task


def test_subtask_of_subtask_is_allowed(memory_repo) -> None:
    parent = memory_repo.create(task_data("Parent"))
    child = memory_repo.create_subtask(parent.id, task_data("Child"))

    grandchild = memory_repo.create_subtask(child.id, task_data("Grandchild"))

    assert grandchild.parent_task_id == child.id
    assert memory_repo.get_subtask_progress(parent.id)["total"] == 1


def test_concurrent_writes_keep_ids_unique(memory_repo) -> None:
    def worker() -> None:
        for n in range(50):
            task = memory_repo.create(task_data(f"Task {n}"))
            memory_repo.update(task.id, {"status": TaskStatus.IN_PROGRESS})

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    tasks = memory_repo.get_all()
    assert len(tasks) == 200
    assert len({task.id for task in tasks}) == 200
    assert memory_repo.get_stats()["in_progress"] == 200
