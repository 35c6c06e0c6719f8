"""Unit tests for CLI command handling."""

from __future__ import annotations

from pathlib import Path

import pytest

from cli.main import build_parser, main


def test_cli_runs_pipeline_and_prints_summary(
    dump_factory, script_factory, tmp_path, capsys
) -> None:
    """CLI should run with the default transformer location and print counts."""
    dump_path = dump_factory([("Dog", "Animal."), ("Dog", "Other.")])
    script_factory("parse_xml", "cat")
    output_path = tmp_path / "out.xml"

    exit_code = main(["--in", str(dump_path), "--out", str(output_path), "--workers", "2"])
    output = capsys.readouterr().out

    assert (
        exit_code == 0
        and "pages_written=1" in output
        and "duplicates_skipped=1" in output
        and output_path.exists()
    )


def test_cli_returns_error_code_for_missing_input(tmp_path: Path, capsys) -> None:
    """Fatal errors should map to exit code 1."""
    exit_code = main(
        [
            "--in",
            str(tmp_path / "missing.xml"),
            "--out",
            str(tmp_path / "out.xml"),
            "--transformer",
            "/bin/cat",
        ]
    )
    output = capsys.readouterr().out

    assert exit_code == 1 and output.startswith("error=")


def test_cli_rejects_invalid_queue_size(tmp_path: Path, capsys) -> None:
    """Invalid overrides are config errors, not crashes."""
    exit_code = main(
        ["--in", str(tmp_path / "in.xml"), "--out", str(tmp_path / "out.xml"), "--queue-size", "0"]
    )

    assert exit_code == 1 and "at least 1" in capsys.readouterr().out


def test_parser_defaults_to_one_worker() -> None:
    """Worker count should default to a single worker."""
    args = build_parser().parse_args(["--in", "a.xml", "--out", "b.xml"])

    assert args.workers == 1 and args.input_path == "a.xml" and args.output_path == "b.xml"


def test_parser_rejects_zero_workers() -> None:
    """A worker count below one is a usage error."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--in", "a.xml", "--out", "b.xml", "--workers", "0"])


def test_parser_requires_input_and_output() -> None:
    """Both --in and --out are mandatory."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--in", "a.xml"])
