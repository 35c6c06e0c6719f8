"""Unit tests for the title deduplication gate."""

from __future__ import annotations

from transforms.page_deduplication import TitleDeduplicator


def test_admit_accepts_first_occurrence_only() -> None:
    """A title should pass once and be rejected afterwards."""
    deduplicator = TitleDeduplicator()

    decisions = [deduplicator.admit(title) for title in ("Dog", "Cat", "Dog", "Dog")]

    assert decisions == [True, True, False, False] and len(deduplicator) == 2


def test_admit_compares_titles_exactly() -> None:
    """Titles differing in case or spacing are distinct keys."""
    deduplicator = TitleDeduplicator()

    decisions = [deduplicator.admit(title) for title in ("Dog", "dog", "Dog ")]

    assert decisions == [True, True, True]
