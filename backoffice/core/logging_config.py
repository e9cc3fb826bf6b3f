"""
Centralized logging configuration.

Modules obtain loggers with `get_logger(__name__)`; the app factory and the
scripts call `setup_logging()` once at startup.
"""

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_initialized = False


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Configure the root logger once and return the package logger."""
    global _initialized
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root = logging.getLogger()
    if not _initialized:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        root.addHandler(handler)
        _initialized = True
    root.setLevel(level)

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)
    return logging.getLogger("backoffice")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
