"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .logging import (
    LOG_LEVEL_ENV_VAR,
    LoggingConfig,
    configure_logging,
    get_logging_config,
    parse_log_level,
)

__all__ = [
    "LOG_LEVEL_ENV_VAR",
    "ConfigurationError",
    "LoggingConfig",
    "configure_logging",
    "get_logging_config",
    "parse_log_level",
]
