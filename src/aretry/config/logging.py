"""Logger setup for the ``aretry`` logger hierarchy.

aretry only emits records; it never installs handlers on import. Call
configure_logging() once at startup to apply the configured level.
"""

from __future__ import annotations

import logging

from .settings import get_settings

ROOT_LOGGER = "aretry"


def configure_logging(level: str | int | None = None, *, handler: logging.Handler | None = None) -> logging.Logger:
    """Set the ``aretry`` logger level (default: ``ARETRY_LOG_LEVEL``) and optionally attach a handler."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level if level is not None else get_settings().logging.level)
    if handler is not None and handler not in logger.handlers:
        logger.addHandler(handler)
    return logger
