from __future__ import annotations

from .config import PACKAGE_LOGGER_NAME, LoggingConfig, parse_level
from .core import configure_logging, reset_logging

__all__ = [
    "PACKAGE_LOGGER_NAME",
    "LoggingConfig",
    "configure_logging",
    "parse_level",
    "reset_logging",
]
