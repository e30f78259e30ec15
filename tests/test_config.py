from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from taskflow.config import Settings, load_settings
from taskflow.infra.logging import setup_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in ("TASKFLOW_BACKEND", "DATABASE_URL", "LOG_LEVEL", "LOG_DIR", "TASKFLOW_SEED_PATH"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_to_memory_backend() -> None:
    settings = load_settings()

    assert settings.backend == "memory"
    assert settings.database_url is None
    assert settings.log_level == "INFO"
    assert settings.seed_path is None


def test_sql_backend_reads_database_url(monkeypatch) -> None:
    monkeypatch.setenv("TASKFLOW_BACKEND", "SQL")
    monkeypatch.setenv("DATABASE_URL", " sqlite:///tasks.db ")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.backend == "sql"
    assert settings.database_url == "sqlite:///tasks.db"
    assert settings.log_level == "debug"


def test_sql_backend_requires_database_url(monkeypatch) -> None:
    monkeypatch.setenv("TASKFLOW_BACKEND", "sql")

    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        load_settings()


def test_unknown_backend(monkeypatch) -> None:
    monkeypatch.setenv("TASKFLOW_BACKEND", "redis")

    with pytest.raises(RuntimeError, match="TASKFLOW_BACKEND"):
        load_settings()


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_without_log_dir(restore_root_logger) -> None:
    setup_logging(Settings(log_dir="", log_level="debug"))

    assert restore_root_logger.level == logging.DEBUG
    assert not any(isinstance(h, RotatingFileHandler) for h in restore_root_logger.handlers)


def test_setup_logging_writes_rotating_file(restore_root_logger, tmp_path) -> None:
    setup_logging(Settings(log_dir=str(tmp_path / "logs")))

    file_handlers = [h for h in restore_root_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert (tmp_path / "logs" / "taskflow.log").exists()
