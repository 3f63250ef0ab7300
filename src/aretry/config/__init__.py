"""Configuration: pydantic-settings defaults and logging setup."""

from .logging import ROOT_LOGGER, configure_logging
from .settings import AretrySettings, LoggingSettings, RetrySettings, clear_settings_cache, get_settings

__all__ = [
    "AretrySettings",
    "RetrySettings",
    "LoggingSettings",
    "get_settings",
    "clear_settings_cache",
    "configure_logging",
    "ROOT_LOGGER",
]
