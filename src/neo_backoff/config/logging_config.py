"""Logging configuration for neo-backoff.

The library only creates module loggers. Applications that want the
library's retry diagnostics on a console call setup_logging() once at
startup; nothing is configured on import.
"""

import logging
import logging.config
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


_FORMATS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}


class LoggingConfig:
    """Logging configuration manager for the neo_backoff logger tree."""

    ROOT_LOGGER = "neo_backoff"

    @classmethod
    def build_config(
        cls,
        level: str = LogLevel.WARNING.value,
        log_format: str = LogFormat.SIMPLE.value,
    ) -> Dict[str, Any]:
        """Build a dictConfig mapping for the library logger.

        Args:
            level: Log level name
            log_format: One of the LogFormat values

        Returns:
            Mapping accepted by logging.config.dictConfig
        """
        effective_level = LogLevel(level.upper()).value
        format_string = _FORMATS[LogFormat(log_format.lower())]

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": format_string,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": effective_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                cls.ROOT_LOGGER: {
                    "level": effective_level,
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
        }

    @classmethod
    def configure(
        cls,
        level: str = LogLevel.WARNING.value,
        log_format: str = LogFormat.SIMPLE.value,
    ) -> None:
        """Apply logging configuration to the neo_backoff logger tree."""
        logging.config.dictConfig(cls.build_config(level, log_format))

        logger = logging.getLogger(__name__)
        logger.debug("Logging configured: level=%s, format=%s", level, log_format)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger for the given module name.

        Args:
            name: Module name (usually __name__)

        Returns:
            Logger instance
        """
        return logging.getLogger(name)

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        """Set log level for a specific module.

        Args:
            module_name: Name of the module
            level: Log level to set
        """
        logger = logging.getLogger(module_name)
        logger.setLevel(getattr(logging, level.upper()))

    @classmethod
    def silence_module(cls, module_name: str) -> None:
        """Silence all logging from a module."""
        cls.set_module_level(module_name, LogLevel.CRITICAL.value)


def setup_logging(
    level: str = LogLevel.WARNING.value,
    log_format: Optional[str] = None,
) -> None:
    """Configure console logging for neo-backoff.

    Call once at application startup. The retry executor logs failed
    attempts at WARNING, recovery at INFO and per-wait detail at DEBUG.
    """
    LoggingConfig.configure(level, log_format or LogFormat.SIMPLE.value)


def get_logger(name: str) -> logging.Logger:
    """Get a logger.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger instance
    """
    return LoggingConfig.get_logger(name)
