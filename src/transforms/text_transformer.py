"""External text transformer backends.

This module defines the single-shot ``text -> cleaned text`` contract used
by transform workers, with a process-per-call backend and an in-process one.
"""

from __future__ import annotations

from pathlib import Path
import subprocess
from typing import Callable, Protocol

from core.constants import (
    DEFAULT_TRANSFORMER_DIR_NAME,
    DEFAULT_TRANSFORMER_FILE_NAME,
    OUTPUT_ENCODING,
)
from core.errors import WikiCleanTransformError


class TextTransformer(Protocol):
    """Stateless text cleaning capability.

    Implementations must be safe to call from several worker threads at once
    and raise ``WikiCleanTransformError`` when a single call fails.
    """

    def transform(self, text: str) -> str:
        """Return cleaned text for one page body."""
        ...


class SubprocessTransformer:
    """Run an executable once per page body.

    The body is written to stdin and the combined stdout/stderr is returned.
    """

    def __init__(self, executable: Path, timeout: float | None = None) -> None:
        self.executable = executable
        self.timeout = timeout

    def transform(self, text: str) -> str:
        """Invoke the executable on one body.

        Args:
            text: Escaped page body.

        Returns:
            Transformer output.

        Raises:
            WikiCleanTransformError: On invocation error, timeout, or non-zero exit.
        """
        try:
            completed = subprocess.run(
                [str(self.executable)],
                input=text.encode(OUTPUT_ENCODING),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as error:
            raise WikiCleanTransformError(
                f"Transformer {self.executable} timed out after {self.timeout}s."
            ) from error
        except OSError as error:
            raise WikiCleanTransformError(
                f"Failed to run transformer {self.executable}: {error.strerror or error}."
            ) from error
        if completed.returncode != 0:
            raise WikiCleanTransformError(
                f"Transformer {self.executable} exited with status {completed.returncode}."
            )
        return completed.stdout.decode(OUTPUT_ENCODING, errors="replace")


class CallableTransformer:
    """Adapt an in-process function to the transformer contract."""

    def __init__(self, func: Callable[[str], str], name: str = "callable") -> None:
        self._func = func
        self.name = name

    def transform(self, text: str) -> str:
        """Call the wrapped function, wrapping any failure."""
        try:
            return self._func(text)
        except WikiCleanTransformError:
            raise
        except Exception as error:
            raise WikiCleanTransformError(
                f"Transformer '{self.name}' failed: {error}"
            ) from error


def default_transformer_path(input_path: Path) -> Path:
    """Locate the transformer next to the dump directory.

    Dumps are expected under ``<repo>/build`` with the transformer at
    ``<repo>/scripts/parse_xml``.

    Args:
        input_path: Dump file path.

    Returns:
        Resolved transformer path.
    """
    dump_dir = input_path.expanduser().resolve().parent
    scripts_dir = dump_dir.parent / DEFAULT_TRANSFORMER_DIR_NAME
    return (scripts_dir / DEFAULT_TRANSFORMER_FILE_NAME).resolve()
