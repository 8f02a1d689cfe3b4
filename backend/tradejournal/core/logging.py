from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path

from tradejournal.core.config import settings

LOG_DIR = Path(__file__).resolve().parents[2] / "logs"
LOG_FILE = LOG_DIR / "app.log"


def setup_logging() -> None:
    """Configure application-wide logging."""

    LOG_DIR.mkdir(parents=True, exist_ok=True)

    handler_names = ["console", "file"]
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "standard",
                "filename": str(LOG_FILE),
                "maxBytes": 5 * 1024 * 1024,
                "backupCount": 5,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "tradejournal": {
                "level": settings.log_level,
                "propagate": True,
            },
            "uvicorn.error": {
                "handlers": handler_names,
                "level": "INFO",
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": handler_names,
                "level": "INFO",
                "propagate": False,
            },
        },
        "root": {
            "handlers": handler_names,
            "level": settings.log_level,
        },
    }

    dictConfig(config)


__all__ = ["setup_logging"]
