"""
Centralized logging configuration for the ``classwallet`` package.

``configure_logging()`` attaches a single stream handler to the package
root logger and is called once by the application entry point.
``get_logger(name)`` is what library modules use; they never attach
handlers of their own.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

from classwallet.config import get_settings

_PKG_LOGGER_NAME = "classwallet"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if level is None:
        level = get_settings().LOG_LEVEL
    level = level.strip().upper()
    if level.isdigit():
        return int(level)
    numeric = getattr(logging, level, None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """
    Configure the package root logger exactly once.

    When ``level`` is None the LOG_LEVEL setting is used.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    # Drop the NullHandler installed by get_logger() before configuration
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    numeric_level = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(
        fmt or "%(asctime)s %(name)s %(levelname)s %(message)s"
    ))
    logger.addHandler(handler)
    logger.setLevel(numeric_level)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, making sure the package root has a handler."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
