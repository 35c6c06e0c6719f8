"""Wikiclean CLI entry point.

This module maps command-line flags onto a clean pipeline run
and prints the end-of-run summary.
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, replace
from typing import Sequence

from core.config import (
    WikiCleanConfig,
    parse_log_level,
    parse_queue_size,
    parse_transform_timeout,
)
from core.constants import DEFAULT_WORKER_COUNT
from core.errors import WikiCleanError
from core.logging_config import configure_logging, get_logger
from core.types import PipelineOptions
from ingest.pipeline import clean_dump

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="wikiclean",
        description="Deduplicate and clean pages of a wiki XML dump",
    )
    parser.add_argument("--in", dest="input_path", required=True, help="The input dump to process")
    parser.add_argument("--out", dest="output_path", required=True, help="The output dump path")
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=DEFAULT_WORKER_COUNT,
        help="How many transform workers to run",
    )
    parser.add_argument(
        "--transformer",
        help="Transformer executable; defaults to <dump dir>/../scripts/parse_xml",
    )
    parser.add_argument("--queue-size", help="Capacity of the stage channels")
    parser.add_argument("--transform-timeout", help="Per-page transformer timeout in seconds")
    parser.add_argument("--log-level", help="Override WIKICLEAN_LOG_LEVEL for this run")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the wikiclean CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        configure_logging(config.log_level)
        options = PipelineOptions(
            input_path=args.input_path,
            output_path=args.output_path,
            workers=args.workers,
            transformer_path=args.transformer,
            queue_size=config.queue_size,
            transform_timeout=config.transform_timeout,
        )
        summary = clean_dump(options, config)
    except WikiCleanError as error:
        _LOGGER.error("wikiclean_aborted", error=str(error))
        print(f"error={error}")
        return 1
    for key, value in asdict(summary).items():
        print(f"{key}={value}")
    return 0


def _build_config(args: argparse.Namespace) -> WikiCleanConfig:
    """Read environment config and apply CLI overrides."""
    config = WikiCleanConfig.from_env()
    if args.queue_size is not None:
        config = replace(config, queue_size=parse_queue_size(args.queue_size, "--queue-size"))
    if args.transform_timeout is not None:
        config = replace(
            config,
            transform_timeout=parse_transform_timeout(
                args.transform_timeout, "--transform-timeout"
            ),
        )
    if args.log_level is not None:
        config = replace(config, log_level=parse_log_level(args.log_level, "--log-level"))
    return config


def _positive_int(raw_value: str) -> int:
    """Argparse type for worker counts."""
    try:
        value = int(raw_value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{raw_value}'") from error
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected at least 1, got {value}")
    return value
