"""Centralized logging configuration for neo-rbac.

Provides consistent, configurable logging with settings-based control over
verbosity and log levels.
"""

import logging
import logging.config
import sys
from enum import Enum
from typing import Any, Dict, Optional

from loguru import logger as loguru_logger

from .settings import RbacSettings, get_settings


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogVerbosity(str, Enum):
    """Log verbosity modes."""
    QUIET = "QUIET"      # Only errors and critical
    NORMAL = "NORMAL"    # Standard logging (warnings and above)
    VERBOSE = "VERBOSE"  # Info level logging
    DEBUG = "DEBUG"      # Full debug logging


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


FORMAT_STRINGS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}

# Equivalent layouts for the loguru handler used by the application services
LOGURU_FORMAT_STRINGS = {
    LogFormat.SIMPLE: "{time:YYYY-MM-DD HH:mm:ss} - {level} - {message}",
    LogFormat.DETAILED: "{time:YYYY-MM-DD HH:mm:ss} - {name} - {level} - [{file}:{line}] - {message}",
    LogFormat.JSON: "{message}",
}


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Map verbosity mode to log level."""
    verbosity_map = {
        LogVerbosity.QUIET: LogLevel.ERROR.value,
        LogVerbosity.NORMAL: LogLevel.WARNING.value,
        LogVerbosity.VERBOSE: LogLevel.INFO.value,
        LogVerbosity.DEBUG: LogLevel.DEBUG.value,
    }
    try:
        return verbosity_map[LogVerbosity(verbosity.upper())]
    except ValueError:
        return LogLevel.WARNING.value


class LoggingConfig:
    """Centralized logging configuration manager."""

    # Modules that chatter at DEBUG on every graph edit
    HIERARCHY_MODULES = [
        "neo_rbac.domain.graph",
        "neo_rbac.infrastructure.cache",
    ]

    @classmethod
    def build(cls, settings: Optional[RbacSettings] = None) -> dict:
        """Build a ``dictConfig`` dictionary from settings."""
        settings = settings or get_settings()
        effective_log_level = get_log_level_from_verbosity(settings.log_verbosity)
        format_string = FORMAT_STRINGS[LogFormat(settings.log_format)]

        logging_config = {
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
                    "level": effective_log_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": effective_log_level,
                "handlers": ["console"],
            },
            "loggers": {
                "neo_rbac": {
                    "level": settings.log_level,
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
        }

        if not settings.enable_hierarchy_logging:
            for module in cls.HIERARCHY_MODULES:
                logging_config["loggers"][module] = {
                    "level": "WARNING" if effective_log_level != "DEBUG" else "DEBUG",
                    "handlers": ["console"],
                    "propagate": False,
                }

        return logging_config

    @classmethod
    def build_loguru(cls, settings: Optional[RbacSettings] = None) -> Dict[str, Any]:
        """Build the ``logger.add`` arguments for the loguru handler.

        Services, the resolver, the audit sink and the engine factory log
        through loguru; their threshold is ``log_level``, like the stdlib
        ``neo_rbac`` logger.
        """
        settings = settings or get_settings()
        log_format = LogFormat(settings.log_format)
        return {
            "sink": sys.stdout,
            "level": settings.log_level,
            "format": LOGURU_FORMAT_STRINGS[log_format],
            "serialize": log_format == LogFormat.JSON,
        }

    @classmethod
    def configure(cls, settings: Optional[RbacSettings] = None) -> None:
        """Configure logging based on settings."""
        logging_config = cls.build(settings)
        logging.config.dictConfig(logging_config)

        loguru_logger.remove()
        loguru_logger.add(**cls.build_loguru(settings))

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured: level={logging_config['root']['level']}")

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        """Set log level for a specific module."""
        logging.getLogger(module_name).setLevel(getattr(logging, level.upper()))


def setup_logging(settings: Optional[RbacSettings] = None) -> None:
    """Setup logging configuration.

    This is the main entry point for configuring logging in the application.
    It should be called once at application startup.
    """
    LoggingConfig.configure(settings)
