from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from taskflow.config import Settings, load_settings
from taskflow.infra.category_repository import InMemoryCategoryRepository
from taskflow.infra.db import create_session_factory, init_db, make_engine
from taskflow.infra.logging import setup_logging
from taskflow.infra.preferences import PreferencesStore
from taskflow.infra.repository import InMemoryTaskRepository
from taskflow.infra.seed import load_seed
from taskflow.infra.sql_repository import SqlCategoryRepository, SqlTaskRepository
from taskflow.services.category_service import CategoryService
from taskflow.services.preferences_service import PreferencesService
from taskflow.services.task_service import TaskService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    tasks: TaskService
    categories: CategoryService
    preferences: PreferencesService


def build_services(settings: Settings) -> Services:
    seed = load_seed(Path(settings.seed_path) if settings.seed_path else None)
    if settings.backend == "sql":
        engine = make_engine(settings.database_url)
        init_db(engine)
        sessions = create_session_factory(engine)
        task_repo = SqlTaskRepository(sessions)
        category_repo = SqlCategoryRepository(sessions)
    else:
        task_repo = InMemoryTaskRepository(seed.tasks)
        category_repo = InMemoryCategoryRepository(seed.categories)

    logger.info("Using %s task backend", settings.backend)
    return Services(
        tasks=TaskService(task_repo, category_repo),
        categories=CategoryService(category_repo),
        preferences=PreferencesService(PreferencesStore(seed.preferences)),
    )


def log_dashboard(services: Services) -> None:
    stats = services.tasks.get_stats()
    logger.info(
        "Tasks total=%s completed=%s pending=%s in_progress=%s overdue=%s rate=%s%%",
        stats["total"],
        stats["completed"],
        stats["pending"],
        stats["in_progress"],
        stats["overdue"],
        stats["completion_rate"],
    )
    for task, category in services.tasks.with_categories(services.tasks.get_due_today()):
        logger.info("Due today: %s [%s]", task.title, category.name if category else "no category")
    for task, category in services.tasks.with_categories(services.tasks.get_upcoming()):
        logger.info(
            "Upcoming: %s on %s [%s]",
            task.title,
            task.due_date.strftime("%Y-%m-%d %H:%M"),
            category.name if category else "no category",
        )


def main() -> None:
    settings = load_settings()
    setup_logging(settings)
    try:
        services = build_services(settings)
    except SQLAlchemyError as exc:
        logger.error("DB error: %s", exc)
        sys.exit(1)
    log_dashboard(services)


if __name__ == "__main__":
    main()
