"""Configuration module for neo-rbac."""

from .settings import RbacSettings, get_settings
from .logging_config import (
    LogFormat,
    LoggingConfig,
    LogVerbosity,
    setup_logging,
)

__all__ = [
    "RbacSettings",
    "get_settings",
    "LogFormat",
    "LoggingConfig",
    "LogVerbosity",
    "setup_logging",
]
