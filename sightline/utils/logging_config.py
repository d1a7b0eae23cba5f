"""Centralized logging configuration for sightline.

Usage:
    from sightline.utils.logging_config import setup_logging
    setup_logging()  # Call once at entry point

    # With debug level and a rotating log file:
    setup_logging(debug=True, log_file="logs/playback.log")
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Log rotation defaults
MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3


def setup_logging(
    level: int = logging.INFO,
    log_file: str | None = None,
    fmt: str = DEFAULT_FORMAT,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
    *,
    debug: bool = False,
) -> None:
    """Configure root logger with consistent format.

    Subsequent calls are no-ops (logging.basicConfig behaviour). When
    *log_file* is given, a RotatingFileHandler capped at *max_bytes* with
    *backup_count* backups is added next to the stderr handler.
    """
    if debug:
        level = logging.DEBUG

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )
    logging.basicConfig(level=level, format=fmt, handlers=handlers)
