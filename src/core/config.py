"""Runtime configuration model for wikiclean.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

from core.constants import DEFAULT_LOG_LEVEL, DEFAULT_QUEUE_SIZE
from core.errors import WikiCleanConfigError


@dataclass(frozen=True)
class WikiCleanConfig:
    """Validated runtime configuration.

    Attributes:
        transformer_path: Optional external transformer executable.
        queue_size: Capacity of the handoff and result channels.
        transform_timeout: Optional per-page transformer timeout in seconds.
        log_level: Minimum level for operator log events.
    """

    transformer_path: Path | None
    queue_size: int
    transform_timeout: float | None
    log_level: str

    @classmethod
    def from_env(cls) -> "WikiCleanConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            WikiCleanConfigError: If environment values are invalid.
        """
        transformer_value = os.getenv("WIKICLEAN_TRANSFORMER")
        queue_size = parse_queue_size(
            os.getenv("WIKICLEAN_QUEUE_SIZE", str(DEFAULT_QUEUE_SIZE)),
            source="WIKICLEAN_QUEUE_SIZE",
        )
        timeout_value = os.getenv("WIKICLEAN_TRANSFORM_TIMEOUT")
        transform_timeout = (
            parse_transform_timeout(timeout_value, source="WIKICLEAN_TRANSFORM_TIMEOUT")
            if timeout_value
            else None
        )
        log_level = parse_log_level(
            os.getenv("WIKICLEAN_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            source="WIKICLEAN_LOG_LEVEL",
        )
        return cls(
            transformer_path=(
                Path(transformer_value).expanduser().resolve() if transformer_value else None
            ),
            queue_size=queue_size,
            transform_timeout=transform_timeout,
            log_level=log_level,
        )


def parse_queue_size(raw_value: str, source: str) -> int:
    """Parse a channel capacity value.

    Args:
        raw_value: Raw string from environment or CLI.
        source: Name of the setting, used in error messages.

    Returns:
        Parsed capacity, at least 1.

    Raises:
        WikiCleanConfigError: If value is not a positive integer.
    """
    try:
        queue_size = int(raw_value)
    except ValueError as error:
        raise WikiCleanConfigError(
            f"Invalid {source} value: expected integer, got '{raw_value}'. "
            f"Set {source} to a positive integer."
        ) from error
    if queue_size < 1:
        raise WikiCleanConfigError(
            f"Invalid {source} value: expected at least 1, got {queue_size}. "
            "Channels must hold at least one in-flight page."
        )
    return queue_size


def parse_transform_timeout(raw_value: str, source: str) -> float:
    """Parse a per-invocation transformer timeout.

    Args:
        raw_value: Raw string from environment or CLI.
        source: Name of the setting, used in error messages.

    Returns:
        Timeout in seconds.

    Raises:
        WikiCleanConfigError: If value is not a positive number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise WikiCleanConfigError(
            f"Invalid {source} value: expected seconds, got '{raw_value}'. "
            f"Set {source} to a positive number."
        ) from error
    if timeout <= 0:
        raise WikiCleanConfigError(
            f"Invalid {source} value: expected a positive number, got {timeout}."
        )
    return timeout


def parse_log_level(raw_value: str, source: str) -> str:
    """Validate a log level name against stdlib level names."""
    level_name = raw_value.strip().upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise WikiCleanConfigError(
            f"Invalid {source} value: '{raw_value}'. "
            "Use one of DEBUG, INFO, WARNING, ERROR."
        )
    return level_name
