from __future__ import annotations

from pathlib import Path

import pytest

from taskflow.infra.db import Base, create_session_factory, make_engine
from taskflow.infra.repository import InMemoryTaskRepository
from taskflow.infra.sql_repository import SqlTaskRepository

from .fakes import NOW, FakeClock


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture()
def memory_repo(clock: FakeClock) -> InMemoryTaskRepository:
    return InMemoryTaskRepository(clock=clock)


@pytest.fixture()
def session_factory(tmp_path: Path):
    engine = make_engine(f"sqlite:///{tmp_path / 'tasks.sqlite3'}")
    Base.metadata.create_all(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def sql_repo(session_factory, clock: FakeClock) -> SqlTaskRepository:
    return SqlTaskRepository(session_factory, clock=clock)


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    """Every repository backend; contract tests run against each."""
    return request.getfixturevalue(f"{request.param}_repo")
