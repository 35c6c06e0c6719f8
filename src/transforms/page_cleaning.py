"""Per-page transform policy and worker loop.

This module applies the redirect short-circuit or the delegated transform
to each page and emits one serialized record per surviving page.
"""

from __future__ import annotations

from typing import Callable

from core.channel import PageChannel
from core.errors import WikiCleanTransformError
from core.logging_config import get_logger
from core.types import Page, WorkerStats
from store.page_serialization import has_illegal_xml_characters, serialize_page
from transforms.link_escaping import escape_links, is_redirect, restore_links
from transforms.text_transformer import TextTransformer

_LOGGER = get_logger(__name__)

PageSerializer = Callable[[Page, bool], str]


def clean_page(page: Page, transformer: TextTransformer) -> Page | None:
    """Apply the transform policy to one page.

    Args:
        page: Decoded page.
        transformer: External text transformer.

    Returns:
        The redirect page unchanged, the cleaned page, or None when the
        transformer failed or produced text that cannot be
        written as XML, in which case the page must be dropped.
    """
    if is_redirect(page.body):
        return page
    try:
        cleaned = restore_links(transformer.transform(escape_links(page.body)))
    except WikiCleanTransformError as error:
        _log_transform_failure(page, str(error))
        return None
    if has_illegal_xml_characters(cleaned):
        _log_transform_failure(page, "transformer output contains characters not allowed in XML")
        return None
    return page.with_body(cleaned)


class TransformWorker:
    """One worker of the transform pool."""

    def __init__(
        self,
        worker_id: int,
        transformer: TextTransformer,
        serializer: PageSerializer = serialize_page,
    ) -> None:
        self.worker_id = worker_id
        self._transformer = transformer
        self._serializer = serializer

    def run(self, handoff: PageChannel[Page], results: PageChannel[str]) -> WorkerStats:
        """Drain the handoff channel until it is closed.

        Args:
            handoff: Channel of decoded unique pages.
            results: Channel of serialized records read by the writer.

        Returns:
            Worker counters.
        """
        _LOGGER.info("worker_started", worker_id=self.worker_id)
        redirects_passed = 0
        pages_transformed = 0
        transform_failures = 0
        for page in handoff:
            _LOGGER.debug("page_processing", worker_id=self.worker_id, title=page.title)
            redirect = is_redirect(page.body)
            cleaned = clean_page(page, self._transformer)
            if cleaned is None:
                transform_failures += 1
                continue
            if redirect:
                redirects_passed += 1
            else:
                pages_transformed += 1
            results.put(self._serializer(cleaned, not redirect))
        _LOGGER.info(
            "worker_finished",
            worker_id=self.worker_id,
            redirects_passed=redirects_passed,
            pages_transformed=pages_transformed,
            transform_failures=transform_failures,
        )
        return WorkerStats(
            redirects_passed=redirects_passed,
            pages_transformed=pages_transformed,
            transform_failures=transform_failures,
        )


def _log_transform_failure(page: Page, reason: str) -> None:
    """Log one dropped page.

    Args:
        page: Page that will not be written.
        reason: Failure description.
    """
    _LOGGER.warning(
        "page_transform_failed",
        title=page.title,
        page_id=page.page_id,
        error=reason,
    )
