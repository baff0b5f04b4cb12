"""Logging setup for the workout map service, driven by ``Settings``."""
from __future__ import annotations

import logging
from logging.config import dictConfig

from workout_map.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def build_logging_config(settings: Settings) -> dict:
    """
    Translate settings into a ``dictConfig`` mapping.

    The console always logs. A file handler is added only when
    ``settings.log_file`` is set. In debug mode the app logs at DEBUG and
    SQLAlchemy's statement log is let through; otherwise SQLAlchemy is held
    at WARNING so request logs stay readable.
    """
    level = "DEBUG" if settings.debug else settings.log_level
    handlers: dict[str, dict] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": level,
        },
    }
    if settings.log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": str(settings.log_dir / settings.log_file),
            "encoding": "utf-8",
            "formatter": "standard",
            "level": level,
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": LOG_FORMAT}},
        "handlers": handlers,
        "loggers": {
            "workout_map": {"level": level},
            "sqlalchemy.engine": {"level": "INFO" if settings.debug else "WARNING"},
        },
        "root": {
            "level": settings.log_level,
            "handlers": list(handlers),
        },
    }


def configure_logging(settings: Settings | None = None, force: bool = False) -> None:
    """Configure application logging once per process unless ``force`` is set."""

    global _configured
    if _configured and not force:
        return

    settings = settings or get_settings()
    if settings.log_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(build_logging_config(settings))
    logging.getLogger(__name__).debug("Logging configured at level %s", settings.log_level)
    _configured = True
