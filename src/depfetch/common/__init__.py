"""Common models and logging used across depfetch modules."""

from .logging import (
    Logger,
    LoggingConfig,
    create_logger,
    disable_library_logging,
    enable_library_logging,
    setup_logging,
)
from .models import AppInfo

__all__ = [
    "AppInfo",
    "Logger",
    "LoggingConfig",
    "create_logger",
    "disable_library_logging",
    "enable_library_logging",
    "setup_logging",
]
