"""
Central logging setup for the portfolio CMS.

Every module logs through ``get_logger(__name__)``; ``setup_logging`` builds a
``logging.config.dictConfig`` from the application settings:

- a console handler at the configured level
- an optional size-rotated ``portfolio_cms.log`` file that always records DEBUG
- quieter levels for chatty third-party loggers

Line formats are ``simple``, ``detailed`` (default) or ``json``.
"""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

from portfolio_cms.server.core.config import settings

LOG_FILE_NAME = "portfolio_cms.log"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

FORMATS = {"simple": SIMPLE_FORMAT, "detailed": DETAILED_FORMAT, "json": JSON_FORMAT}

# Cache hits/misses and slow queries log from portfolio_cms.core.cache at DEBUG/WARNING.
MODULE_LOG_LEVELS = {
    "portfolio_cms": "DEBUG",
    "portfolio_cms.core.cache": "INFO",
    "portfolio_cms.core.database": "INFO",
    "portfolio_cms.server.middleware": "INFO",
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "httpx": "WARNING",
    "passlib": "WARNING",
    "aiosqlite": "WARNING",
    "uvicorn.access": "INFO",
}


def build_logging_config(
    log_level: str,
    log_format: str,
    log_file: Optional[Path] = None,
) -> Dict[str, Any]:
    """Return a ``dictConfig`` mapping; unknown formats fall back to ``detailed``."""
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "default",
        }
    }
    if log_file is not None:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "default",
            "filename": str(log_file),
            "maxBytes": settings.log_file_max_bytes,
            "backupCount": settings.log_file_backup_count,
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": FORMATS.get(log_format, DETAILED_FORMAT),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "handlers": handlers,
        "loggers": {name: {"level": level} for name, level in MODULE_LOG_LEVELS.items()},
        "root": {"level": "DEBUG", "handlers": list(handlers)},
    }


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Console level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format override (simple, detailed, json)
        enable_file: Allow the rotating file handler when ``ENABLE_FILE_LOGGING`` is on
    """
    level = (log_level or settings.log_level).upper()
    fmt = log_format or settings.log_format

    log_file = None
    if enable_file and settings.log_file_enabled:
        log_dir = Path(settings.log_file_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME

    logging.config.dictConfig(build_logging_config(level, fmt, log_file))
    logging.getLogger(__name__).info(f"Logging configured: level={level}, format={fmt}, file={log_file}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module (typically ``__name__``)."""
    return logging.getLogger(name)


setup_logging()
