"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import WikiCleanConfig, parse_queue_size, parse_transform_timeout
from core.errors import WikiCleanConfigError


def test_from_env_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fall back to defaults when nothing is set."""
    for name in (
        "WIKICLEAN_TRANSFORMER",
        "WIKICLEAN_QUEUE_SIZE",
        "WIKICLEAN_TRANSFORM_TIMEOUT",
        "WIKICLEAN_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    config = WikiCleanConfig.from_env()

    assert (
        config.transformer_path is None
        and config.queue_size == 1
        and config.transform_timeout is None
        and config.log_level == "INFO"
    )


def test_from_env_reads_transformer_and_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve transformer path and parse timeout seconds."""
    monkeypatch.setenv("WIKICLEAN_TRANSFORMER", "./scripts/parse_xml")
    monkeypatch.setenv("WIKICLEAN_TRANSFORM_TIMEOUT", "2.5")
    monkeypatch.setenv("WIKICLEAN_LOG_LEVEL", "debug")

    config = WikiCleanConfig.from_env()

    assert (
        config.transformer_path is not None
        and config.transformer_path.name == "parse_xml"
        and config.transformer_path.is_absolute()
        and config.transform_timeout == 2.5
        and config.log_level == "DEBUG"
    )


def test_from_env_raises_for_invalid_queue_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric queue size."""
    monkeypatch.setenv("WIKICLEAN_QUEUE_SIZE", "many")

    with pytest.raises(WikiCleanConfigError):
        WikiCleanConfig.from_env()

    assert os.getenv("WIKICLEAN_QUEUE_SIZE") == "many"


def test_from_env_raises_for_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject log level names stdlib does not know."""
    monkeypatch.setenv("WIKICLEAN_LOG_LEVEL", "chatty")

    with pytest.raises(WikiCleanConfigError):
        WikiCleanConfig.from_env()


def test_parse_queue_size_rejects_zero() -> None:
    """Channels need room for at least one item."""
    with pytest.raises(WikiCleanConfigError, match="at least 1"):
        parse_queue_size("0", "--queue-size")


def test_parse_transform_timeout_rejects_negative() -> None:
    """Timeouts must be positive seconds."""
    with pytest.raises(WikiCleanConfigError):
        parse_transform_timeout("-1", "--transform-timeout")
