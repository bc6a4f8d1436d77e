"""Logging setup for the command line tools."""
from __future__ import annotations

import logging
import sys

LOGGER_NAME = "mdlog"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a stderr handler to the ``mdlog`` logger.

    stdout carries templates and extracted records, so logs never go there.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "LOG_FORMAT", "setup_logging"]
