"""Process-wide file logging for docrepo."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from ..constants import LOG_FILE_NAME
from .get_home_dir import get_home_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

_CONFIGURED = False


def configure_logging(home: Path | None = None, level: str = "INFO", log_file: Path | None = None) -> None:
    """Attach a rotating log file to the ``docrepo`` logger (first call wins).

    Args:
        home: docrepo home directory (default: ``get_home_dir()``)
        level: Level name for the ``docrepo`` logger
        log_file: Log file path (default: ``<home>/docrepo.log``)
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    if log_file is None:
        log_file = (home or get_home_dir()) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger("docrepo")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.addHandler(handler)

    logging.getLogger("pymongo").setLevel(logging.WARNING)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Logger ``docrepo.<name>``; configures file logging with defaults if nothing has yet."""
    configure_logging()
    return logging.getLogger(f"docrepo.{name}")
