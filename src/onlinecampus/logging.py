"""Logging setup for OnlineCampus.

Every module logs through a child of the ``onlinecampus`` logger, so a single
setup_logging call routes the API, the store and the CLI into one rotating
log file.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "onlinecampus"

LOG_DIR_ENV = "ONLINECAMPUS_LOG_DIR"
LOG_LEVEL_ENV = "ONLINECAMPUS_LOG_LEVEL"

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "onlinecampus.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: str | None) -> int:
    """Map a level name to a logging level, defaulting to INFO.

    None reads ONLINECAMPUS_LOG_LEVEL. Unknown names fall back to INFO.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Send all onlinecampus logs to a rotating file and, optionally, stderr.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_dir: Directory for log files, created if missing. Defaults to
                 ONLINECAMPUS_LOG_DIR, then 'logs'.
        log_file: Log file name inside log_dir.
        max_bytes: Size at which the file is rotated.
        backup_count: Number of rotated files to keep.
        level: Level name such as DEBUG or WARNING. Defaults to
               ONLINECAMPUS_LOG_LEVEL, then INFO.
        console: Whether to also log to stderr.

    Returns:
        The root onlinecampus logger.
    """
    if log_dir is None:
        log_dir = os.environ.get(LOG_DIR_ENV, DEFAULT_LOG_DIR)
    log_path = Path(log_dir) / log_file
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_level = resolve_level(level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    _reset_handlers(logger)

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Logging to %s at %s", log_path, logging.getLevelName(log_level))
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the onlinecampus root.

    Args:
        name: Component name such as 'api' or 'state_store'. The
              'onlinecampus.' prefix is added when missing.
    """
    if not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
