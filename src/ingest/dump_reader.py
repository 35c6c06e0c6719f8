"""Streaming dump decoder.

This module reads a dump page by page with ``iterparse`` and feeds unique
pages into the handoff channel. Memory stays bounded by one page subtree.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator
from xml.etree import ElementTree

from core.channel import PageChannel
from core.constants import PAGE_TAG
from core.errors import WikiCleanIngestError
from core.logging_config import get_logger
from core.types import DecoderStats, Page
from ingest.page_parser import local_name, parse_page_element
from transforms.page_deduplication import TitleDeduplicator

_LOGGER = get_logger(__name__)


def iter_dump_pages(input_path: Path) -> Iterator[Page]:
    """Yield pages from a dump file in input order.

    Args:
        input_path: Dump file path.

    Yields:
        One parsed page per ``<page>`` element.

    Raises:
        WikiCleanIngestError: If the file cannot be opened or is malformed.
    """
    try:
        dump_file = input_path.open("rb")
    except OSError as error:
        raise WikiCleanIngestError(
            f"Failed to open dump at {input_path}: {error.strerror or error}. "
            "Provide an existing, readable --in path."
        ) from error
    with dump_file:
        root = None
        try:
            for event, element in ElementTree.iterparse(dump_file, events=("start", "end")):
                if root is None:
                    root = element
                if event != "end" or local_name(element.tag) != PAGE_TAG:
                    continue
                page = parse_page_element(element)
                root.clear()
                yield page
        except ElementTree.ParseError as error:
            raise WikiCleanIngestError(
                f"Failed to parse dump at {input_path}: {error}. "
                "The input is not well-formed XML."
            ) from error


class DumpDecoder:
    """Single decoder stage feeding unique titled pages to the workers."""

    def __init__(self, input_path: Path, deduplicator: TitleDeduplicator | None = None) -> None:
        self._input_path = input_path
        self._deduplicator = deduplicator if deduplicator is not None else TitleDeduplicator()

    def run(self, handoff: PageChannel[Page]) -> DecoderStats:
        """Decode the whole dump into the handoff channel, then close it.

        Args:
            handoff: Channel read by the transform workers.

        Returns:
            Decoder counters.
        """
        pages_decoded = 0
        duplicates_skipped = 0
        untitled_skipped = 0
        for page in iter_dump_pages(self._input_path):
            pages_decoded += 1
            if not page.title:
                untitled_skipped += 1
                _LOGGER.warning("page_missing_title_skipped", page_id=page.page_id)
                continue
            if not self._deduplicator.admit(page.title):
                duplicates_skipped += 1
                _LOGGER.warning("duplicate_title_skipped", title=page.title, page_id=page.page_id)
                continue
            handoff.put(page)
        handoff.close()
        _LOGGER.info(
            "decoder_finished",
            input_path=str(self._input_path),
            pages_decoded=pages_decoded,
            duplicates_skipped=duplicates_skipped,
            untitled_skipped=untitled_skipped,
        )
        return DecoderStats(
            pages_decoded=pages_decoded,
            duplicates_skipped=duplicates_skipped,
            untitled_skipped=untitled_skipped,
        )
