"""Configuration: settings and logging."""

from .settings import IdentitySettings, get_settings
from .logging_config import LoggingConfig, LogLevel, LogVerbosity, LogFormat, setup_logging, get_logger

__all__ = [
    "IdentitySettings",
    "get_settings",
    "LoggingConfig",
    "LogLevel",
    "LogVerbosity",
    "LogFormat",
    "setup_logging",
    "get_logger",
]
