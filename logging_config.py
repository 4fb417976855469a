"""
Calendar Service - Logging
===========================

All modules log under the `calendar_service` logger:

    from logging_config import get_logger
    logger = get_logger(__name__)

Nothing is configured at import time. `setup_logging()` runs once when the
app is built (after `.env` is loaded) and attaches:
- console: DEBUG in development, INFO when APP_ENV=production
- LOG_DIR/calendar_service.log: INFO and up, rotated at 5 MB
- LOG_DIR/calendar_service_errors.log: ERROR and up (500 tracebacks)
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "calendar_service"
DEFAULT_LOG_DIR = Path(os.path.abspath(os.path.dirname(__file__))) / "logs"

MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _rotating_file(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(environment: Optional[str] = None, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Attaches console and rotating file handlers to the service logger.

    Safe to call repeatedly: a logger that already has handlers is
    returned untouched.

    Args:
        environment: "development" or "production". Defaults to APP_ENV.
        log_dir: Where the log files go. Defaults to LOG_DIR or ./logs.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if root_logger.handlers:
        return root_logger

    environment = environment or os.getenv("APP_ENV", "development")
    log_dir = Path(log_dir or os.getenv("LOG_DIR", DEFAULT_LOG_DIR))
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO if environment == "production" else logging.DEBUG)
    console.setFormatter(formatter)

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console)
    root_logger.addHandler(_rotating_file(log_dir / "calendar_service.log", logging.INFO, formatter))
    root_logger.addHandler(_rotating_file(log_dir / "calendar_service_errors.log", logging.ERROR, formatter))
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Child of the service logger; output appears once setup_logging() has run."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
