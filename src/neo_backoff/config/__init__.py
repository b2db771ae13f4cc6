"""Configuration module for neo-backoff."""

from .constants import BackoffDefaults, DurationLimits
from .logging_config import (
    LogFormat,
    LogLevel,
    LoggingConfig,
    get_logger,
    setup_logging,
)

__all__ = [
    "BackoffDefaults",
    "DurationLimits",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
]
