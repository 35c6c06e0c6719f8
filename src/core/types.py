"""Shared typed models.

This module defines immutable page models and pipeline options used by
the decoder, workers, writer, and CLI to keep stage interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from core.constants import DEFAULT_WORKER_COUNT


@dataclass(frozen=True)
class Contributor:
    """Revision author block, copied through unchanged.

    Attributes:
        username: Registered user name, empty for anonymous edits.
        contributor_id: Registered user id.
        ip: Address recorded for anonymous edits.
    """

    username: str = ""
    contributor_id: str = ""
    ip: str = ""


@dataclass(frozen=True)
class RevisionText:
    """Revision body and its element attributes.

    Attributes:
        body: Wikitext payload subject to transformation.
        byte_count: Original ``bytes`` attribute.
        space: Original ``xml:space`` attribute.
    """

    body: str
    byte_count: str = ""
    space: str = ""


@dataclass(frozen=True)
class Revision:
    """Latest revision of a page.

    Attributes:
        revision_id: Revision id.
        parent_id: Parent revision id.
        timestamp: Edit timestamp string.
        contributor: Author block.
        comment: Edit summary.
        model: Content model name.
        content_format: Content format mime type.
        text: Body text and attributes.
        sha1: Original checksum, never recomputed.
    """

    revision_id: str
    text: RevisionText
    parent_id: str = ""
    timestamp: str = ""
    contributor: Contributor = Contributor()
    comment: str = ""
    model: str = ""
    content_format: str = ""
    sha1: str = ""


@dataclass(frozen=True)
class Page:
    """One dump record.

    Attributes:
        title: Page title, the deduplication key.
        namespace: Namespace key.
        page_id: Page id.
        redirect_title: Redirect target when the page is a redirect stub.
        revision: Revision metadata and body.
    """

    title: str
    namespace: str
    page_id: str
    revision: Revision
    redirect_title: str | None = None

    @property
    def body(self) -> str:
        """Return the revision body text."""
        return self.revision.text.body

    def with_body(self, body: str) -> "Page":
        """Return a copy of this page carrying a new body."""
        text = replace(self.revision.text, body=body)
        return replace(self, revision=replace(self.revision, text=text))


@dataclass(frozen=True)
class PipelineOptions:
    """Clean pipeline run options.

    Attributes:
        input_path: Dump file to read.
        output_path: Dump file to create.
        workers: Number of concurrent transform workers.
        transformer_path: Optional transformer executable override.
        queue_size: Optional channel capacity override.
        transform_timeout: Optional per-page transformer timeout override.
    """

    input_path: str
    output_path: str
    workers: int = DEFAULT_WORKER_COUNT
    transformer_path: str | None = None
    queue_size: int | None = None
    transform_timeout: float | None = None


@dataclass(frozen=True)
class DecoderStats:
    """Decoder counters for one run."""

    pages_decoded: int = 0
    duplicates_skipped: int = 0
    untitled_skipped: int = 0


@dataclass(frozen=True)
class WorkerStats:
    """Counters reported by one transform worker."""

    redirects_passed: int = 0
    pages_transformed: int = 0
    transform_failures: int = 0


@dataclass(frozen=True)
class WriterStats:
    """Writer counters for one run."""

    pages_written: int = 0


@dataclass(frozen=True)
class PipelineSummary:
    """End-of-run counts.

    Attributes:
        pages_decoded: Pages parsed from the input dump.
        duplicates_skipped: Pages dropped by the title dedup gate.
        untitled_skipped: Pages dropped because they carry no title.
        redirects_passed: Redirect stubs emitted without transformation.
        pages_transformed: Pages cleaned by the external transformer.
        transform_failures: Pages dropped after a transformer failure.
        pages_written: Records appended to the output dump.
    """

    pages_decoded: int
    duplicates_skipped: int
    untitled_skipped: int
    redirects_passed: int
    pages_transformed: int
    transform_failures: int
    pages_written: int
