"""Logging utilities for depfetch using Loguru.

This module provides logging configuration for both CLI and library usage:
- CLI usage: scoped, colorized stderr in dev; JSON lines everywhere else
- Library usage: Logging disabled by default, can be enabled by library users
"""

import sys
from functools import lru_cache
from typing import Literal

import loguru
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from depfetch.constants import APP_NAME

from .models import AppInfo

type Logger = "loguru.Logger"


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    log_level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: Literal["json", "text"] | None = Field(default=None)


@lru_cache
def get_color_from_name(name: str | None) -> str:
    """
    Map a name to a predefined color in a deterministic way.
    """
    colors = [
        "blue",
        "magenta",
        "yellow",
        "white",
        "light-blue",
        "light-green",
        "light-magenta",
        "light-yellow",
    ]

    if not name:
        return colors[0]

    name_hash = sum(ord(c) for c in name)
    return colors[name_hash % len(colors)]


def get_dev_logs_format(record: "loguru.Record") -> str:
    """Colorized format with the logger scope at the beginning."""
    scope = record["extra"].get("scope", None)
    module_color = f"<{get_color_from_name(scope)}>"

    extra_fields = {k: v for k, v in record["extra"].items() if k not in ["scope", "env"]}
    extra_str = ""
    if extra_fields:
        extra_str = " | " + " ".join(f"{k}={v}" for k, v in extra_fields.items())

    return (
        f"{module_color}[{{extra[scope]}}]</> | "
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}:{function}:{line}</cyan> - "
        "<level>{message}</level>"
        f"{extra_str}\n{{exception}}"
    )


def setup_logging(app_info: AppInfo, config: LoggingConfig) -> None:
    """
    Configure Loguru for a fetch run.
    Text output goes to stderr; JSON output goes to stdout with errors duplicated to stderr.
    """
    logger.enable(APP_NAME)
    logger.remove()
    logger.configure(extra={"scope": "global", "env": app_info.environment})

    log_format = config.format or ("text" if app_info.environment == "dev" else "json")

    if log_format == "text":
        logger.add(sys.stderr, level=config.log_level, format=get_dev_logs_format, colorize=True)
    else:
        logger.add(sys.stdout, level=config.log_level, serialize=True, format="{message}")
        logger.add(sys.stderr, level="ERROR", serialize=True, format="{message}", diagnose=False)

    logger.info(f"Logging initialized: {app_info.project_name} v{app_info.version} ({app_info.environment})")


def disable_library_logging() -> None:
    logger.disable(APP_NAME)


def enable_library_logging(level: str = "INFO") -> int:
    logger.enable(APP_NAME)
    logger.remove()

    return logger.add(
        sys.stderr,
        level=level,
        format=get_dev_logs_format,
        colorize=False,
    )


def create_logger(scope: str) -> Logger:
    return logger.bind(scope=scope)
