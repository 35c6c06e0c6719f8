"""Wiki link sentinel substitution.

This module swaps ``[[`` and ``]]`` for sentinel tokens before text goes to
the external transformer and swaps them back afterwards.
"""

from __future__ import annotations

from core.constants import (
    LINK_CLOSE,
    LINK_CLOSE_SENTINEL,
    LINK_OPEN,
    LINK_OPEN_SENTINEL,
    REDIRECT_MARKER,
)


def escape_links(text: str) -> str:
    """Replace link delimiters with sentinel placeholders."""
    return text.replace(LINK_OPEN, LINK_OPEN_SENTINEL).replace(LINK_CLOSE, LINK_CLOSE_SENTINEL)


def restore_links(text: str) -> str:
    """Replace sentinel placeholders with link delimiters."""
    return text.replace(LINK_OPEN_SENTINEL, LINK_OPEN).replace(LINK_CLOSE_SENTINEL, LINK_CLOSE)


def is_redirect(text: str) -> bool:
    """Return whether a body is a redirect stub."""
    return text.startswith(REDIRECT_MARKER)
