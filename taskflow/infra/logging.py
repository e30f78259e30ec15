from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from taskflow.config import PROJECT_ROOT, Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(settings: Settings) -> None:
    """Console logging, plus a rotating taskflow.log unless LOG_DIR is empty."""
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    if settings.log_dir:
        log_dir = PROJECT_ROOT / settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / "taskflow.log", maxBytes=2_000_000, backupCount=3
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=settings.log_level.upper(), handlers=handlers, force=True)
    logging.getLogger(__name__).debug("Logging configured level=%s", settings.log_level)
