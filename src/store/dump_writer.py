"""Sequential output dump writer.

This module is the only owner of the output file handle. It frames the
serialized records arriving on the result channel with header and trailer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, TextIO

from core.constants import ENCODED_NEWLINE_ARTIFACTS, OUTPUT_ENCODING
from core.errors import WikiCleanStoreError
from core.logging_config import get_logger
from core.types import WriterStats
from store.dump_header import DUMP_HEADER, DUMP_TRAILER

_LOGGER = get_logger(__name__)


def strip_serialization_artifacts(record: str) -> str:
    """Remove encoded newline entities introduced by re-serialization."""
    for artifact in ENCODED_NEWLINE_ARTIFACTS:
        record = record.replace(artifact, "")
    return record


class DumpWriter:
    """Single writer stage."""

    def __init__(self, output_path: Path) -> None:
        self._output_path = output_path

    def run(self, records: Iterable[str]) -> WriterStats:
        """Write header, every record in arrival order, then the trailer.

        Args:
            records: Serialized records, usually the result channel.

        Returns:
            Writer counters.

        Raises:
            WikiCleanStoreError: If the output cannot be created or written.
        """
        try:
            output_file = self._output_path.open("w", encoding=OUTPUT_ENCODING)
        except OSError as error:
            raise WikiCleanStoreError(
                f"Failed to create output dump at {self._output_path}: "
                f"{error.strerror or error}. Check that --out points to a writable path."
            ) from error
        pages_written = 0
        with output_file:
            self._write(output_file, DUMP_HEADER)
            for record in records:
                self._write(output_file, "\n" + strip_serialization_artifacts(record))
                pages_written += 1
            self._write(output_file, DUMP_TRAILER)
        _LOGGER.info(
            "writer_finished",
            output_path=str(self._output_path),
            pages_written=pages_written,
        )
        return WriterStats(pages_written=pages_written)

    def _write(self, output_file: TextIO, text: str) -> None:
        """Write text to the output dump.

        Args:
            output_file: Open output handle.
            text: Text to append.

        Raises:
            WikiCleanStoreError: If the write fails.
        """
        try:
            output_file.write(text)
        except OSError as error:
            raise WikiCleanStoreError(
                f"Failed to write output dump at {self._output_path}: "
                f"{error.strerror or error}."
            ) from error
