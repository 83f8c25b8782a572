"""Logging setup for the registration server"""

import logging
import sys
from typing import Optional

from squid_registration.config import config

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"

# Loggers owned by uvicorn that should flow through our handlers
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class InfoFilter(logging.Filter):
    """Only pass records below WARNING"""

    def filter(self, record):
        return record.levelno < logging.WARNING


def setup_logging(log_level: Optional[str] = None):
    """
    Send INFO/DEBUG to stdout and WARNING/ERROR to stderr.

    uvicorn's own loggers are stripped of their handlers and left to
    propagate, so access lines and server errors share one format.

    Args:
        log_level: Level name; defaults to LOG_LEVEL from config
    """
    level_name = (log_level or config.get("log_level") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(InfoFilter())
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module name.

    Args:
        name: Usually __name__ from the calling module

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
