"""Logging configuration for cascadegraph."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Final

from .errors import ConfigurationError

LOG_LEVEL_ENV_VAR: Final[str] = "CASCADEGRAPH_LOG_LEVEL"
DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATE_FORMAT: Final[str] = "%H:%M:%S"


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: int = logging.INFO
    format: str = DEFAULT_LOG_FORMAT
    datefmt: str = DEFAULT_DATE_FORMAT


def parse_log_level(value: str) -> int:
    """Accept a level name (``debug``) or number (``10``)."""

    normalized = value.strip()
    if normalized.isdigit():
        return int(normalized)
    level = logging.getLevelNamesMapping().get(normalized.upper())
    if level is None:
        raise ConfigurationError(f"Invalid log level in {LOG_LEVEL_ENV_VAR}: {value!r}")
    return level


def get_logging_config() -> LoggingConfig:
    env_level = os.getenv(LOG_LEVEL_ENV_VAR)
    if env_level is None or not env_level.strip():
        return LoggingConfig()
    return LoggingConfig(level=parse_log_level(env_level))


def configure_logging(
    config: LoggingConfig | None = None,
    *,
    force: bool = False,
) -> None:
    """Initialise the root logger once with sensible defaults.

    Without an explicit config the level is read from the environment. Pass
    ``force=True`` to reconfigure during tests or specialised entry points.
    """

    resolved = config or get_logging_config()
    logging.basicConfig(
        level=resolved.level,
        format=resolved.format,
        datefmt=resolved.datefmt,
        force=force,
    )
