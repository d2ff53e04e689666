"""
Logging configuration for the promptpacker CLI.

All log output goes to stderr with a `[LEVEL] message` prefix. The level comes
from the caller, else the `PROMPTPACKER_LOG_LEVEL` environment variable, else INFO.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "PROMPTPACKER_LOG_LEVEL"
LOG_FORMAT = "[%(levelname)s] %(message)s"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """
    Install a single stderr handler on the `promptpacker` logger, replacing any
    handler a previous call installed.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("promptpacker")
    logger.handlers = []
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
