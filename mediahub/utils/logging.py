"""Logging configuration utilities."""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

from mediahub.config import get_settings

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 10


def _rotating_file(path: Path, level: str, formatter: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": str(path),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": LOG_BACKUPS,
        "encoding": "utf-8",
    }


def get_logging_config() -> Dict[str, Any]:
    """
    Get logging configuration dictionary.

    Application records go to ``mediahub.log``; the per-request lines
    written by the HTTP middleware go to ``access.log`` instead.

    Returns:
        Logging configuration for dictConfig
    """
    settings = get_settings()
    level = settings.log_level
    formatter = "json" if settings.log_format == "json" else "standard"
    log_dir = Path(settings.log_dir)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "fmt": "%(asctime)s %(name)s %(levelname)s %(message)s",
                "rename_fields": {"levelname": "level", "asctime": "time"},
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
            "file": _rotating_file(log_dir / "mediahub.log", level, formatter),
            "access_file": _rotating_file(log_dir / "access.log", level, formatter),
        },
        "loggers": {
            "mediahub": {
                "level": level,
                "handlers": ["console", "file"],
                "propagate": False,
            },
            "mediahub.http": {
                "level": level,
                "handlers": ["access_file"],
                "propagate": False,
            },
            # Request lines are already written by the HTTP middleware
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }


def setup_logging() -> None:
    """Create the log directory and apply the logging configuration."""
    Path(get_settings().log_dir).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(get_logging_config())

    logging.getLogger("mediahub").info("Logging configured successfully")
