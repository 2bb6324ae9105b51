"""Centralized logging configuration for the ``app`` package.

- ``configure_logging(...)`` attaches a single ``StreamHandler`` to the package
  root logger (``"app"``). Called once by entrypoints (the FastAPI lifespan,
  scripts).
- ``get_logger(name)`` returns a logger and makes sure the package root logger
  has at least a ``NullHandler`` when nothing has been configured yet.

Library modules never attach handlers themselves.
"""
from __future__ import annotations

import logging
import sys
from typing import IO

from app.config import settings

_PKG_LOGGER_NAME = "app"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if level is None:
        level = settings.LOG_LEVEL
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
    """Configure the package root logger exactly once.

    ``level`` defaults to ``settings.LOG_LEVEL``.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setLevel(_parse_level(level))
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, silent until ``configure_logging`` runs."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
