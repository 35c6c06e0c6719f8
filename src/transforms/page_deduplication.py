"""Title deduplication gate.

This module drops pages whose title was already admitted in this run.
It is applied by the decoder before any page reaches the worker pool.
"""

from __future__ import annotations


class TitleDeduplicator:
    """Check-and-insert gate over the titles seen in one run.

    The seen set is owned by a single decoder and grows for the whole run.
    Evicting entries would let late duplicates through, so it is unbounded.
    """

    def __init__(self) -> None:
        self._seen_titles: set[str] = set()

    def admit(self, title: str) -> bool:
        """Record a title and report whether it is new.

        Args:
            title: Page title, compared by exact value.

        Returns:
            True on first occurrence, False for duplicates.
        """
        if title in self._seen_titles:
            return False
        self._seen_titles.add(title)
        return True

    def __len__(self) -> int:
        return len(self._seen_titles)
