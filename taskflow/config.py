from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

BACKENDS = ("memory", "sql")


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    backend: str = "memory"
    database_url: str | None = None
    log_level: str = "INFO"
    log_dir: str = "logs"
    seed_path: str | None = None


def load_settings() -> Settings:
    backend = os.getenv("TASKFLOW_BACKEND", "memory").strip().lower()
    if backend not in BACKENDS:
        raise RuntimeError(f"TASKFLOW_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}.")

    database_url = os.getenv("DATABASE_URL", "").strip() or None
    if backend == "sql" and not database_url:
        raise RuntimeError("DATABASE_URL is not set. Create a .env file with your connection string.")

    return Settings(
        backend=backend,
        database_url=database_url,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR", "logs").strip(),
        seed_path=os.getenv("TASKFLOW_SEED_PATH", "").strip() or None,
    )


load_env()
