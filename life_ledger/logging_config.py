import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import List, Optional


APP_LOGGER_NAME = "life_ledger"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries whose INFO chatter would drown out store and request logs
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "alembic",
    "uvicorn.access",
    "httpx",
    "urllib3",
    "jose",
)


def _level(value: Optional[str], default: int) -> int:
    if not value:
        return default
    return getattr(logging, value.upper(), default)


def _handlers(level: int, log_file: Optional[str], max_file_size: int, backup_count: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        ))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    app_log_level: Optional[str] = None,
    third_party_log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the ``life_ledger`` logger tree.

    Arguments fall back to APP_LOG_LEVEL, THIRD_PARTY_LOG_LEVEL and LOG_FILE.
    Calling this again replaces the handlers instead of stacking them, so the
    app module and the seed scripts can both call it.

    Returns:
        The application logger
    """
    app_level = _level(app_log_level or os.getenv("APP_LOG_LEVEL"), logging.INFO)
    quiet_level = _level(third_party_log_level or os.getenv("THIRD_PARTY_LOG_LEVEL"), logging.WARNING)

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(app_level)
    app_logger.handlers.clear()
    for handler in _handlers(app_level, log_file or os.getenv("LOG_FILE"), max_file_size, backup_count):
        app_logger.addHandler(handler)
    app_logger.propagate = False

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(quiet_level)

    return app_logger


def get_logger(name: str = APP_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Module names that already live under the package (``life_ledger.crud...``)
    are used as-is; anything else is nested under the application logger.
    """
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
