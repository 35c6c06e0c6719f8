"""Unit tests for the per-page transform policy and worker loop."""

from __future__ import annotations

import threading

from core.channel import PageChannel
from core.errors import WikiCleanTransformError
from core.types import Page, Revision, RevisionText
from transforms.page_cleaning import TransformWorker, clean_page
from transforms.text_transformer import CallableTransformer


def _page(title: str, body: str) -> Page:
    revision = Revision(revision_id="1", text=RevisionText(body=body), sha1="orig")
    return Page(title=title, namespace="0", page_id="1", revision=revision)


class _RecordingTransformer:
    def __init__(self, output: str | None = None) -> None:
        self.inputs: list[str] = []
        self._output = output

    def transform(self, text: str) -> str:
        self.inputs.append(text)
        return text if self._output is None else self._output


class _FailingTransformer:
    def transform(self, text: str) -> str:
        raise WikiCleanTransformError(f"cannot clean {text}")


def test_clean_page_skips_transformer_for_redirects() -> None:
    """Redirect stubs should pass through byte-identical and untouched."""
    transformer = _RecordingTransformer()
    page = _page("Kitty", "#REDIRECT [[Cat]]")

    cleaned = clean_page(page, transformer)

    assert cleaned is page and transformer.inputs == []


def test_clean_page_escapes_links_and_restores_output() -> None:
    """The transformer should see sentinels and the result should have brackets."""
    transformer = _RecordingTransformer(output="Hi <SPEC_START>World<SPEC_END>.")

    cleaned = clean_page(_page("Greeting", "Hello [[World]]."), transformer)

    assert (
        transformer.inputs == ["Hello <SPEC_START>World<SPEC_END>."]
        and cleaned is not None
        and cleaned.body == "Hi [[World]]."
        and cleaned.revision.sha1 == "orig"
    )


def test_clean_page_returns_none_on_transform_failure() -> None:
    """Failed pages should be dropped without raising."""
    assert clean_page(_page("Broken", "text"), _FailingTransformer()) is None


def test_worker_emits_one_record_per_surviving_page() -> None:
    """Worker should drop failures, count outcomes, and exit on closure."""
    cancel_event = threading.Event()
    handoff: PageChannel[Page] = PageChannel("handoff", 8, cancel_event)
    results: PageChannel[str] = PageChannel("results", 8, cancel_event)
    for page in (
        _page("Dog", "Animal."),
        _page("Kitty", "#REDIRECT [[Cat]]"),
        _page("Broken", "Broken body"),
    ):
        handoff.put(page)
    handoff.close()

    def clean(text: str) -> str:
        if text.startswith("Broken"):
            raise ValueError("unparseable")
        return text.upper()

    worker = TransformWorker(1, CallableTransformer(clean, name="upper"))
    stats = worker.run(handoff, results)
    results.close()
    records = list(results)

    assert (
        len(records) == 2
        and any("<title>Dog</title>" in record and "ANIMAL." in record for record in records)
        and any("#REDIRECT [[Cat]]" in record for record in records)
        and stats.pages_transformed == 1
        and stats.redirects_passed == 1
        and stats.transform_failures == 1
    )


def test_worker_serializes_redirects_compactly() -> None:
    """Redirect records are emitted without indentation whitespace."""
    cancel_event = threading.Event()
    handoff: PageChannel[Page] = PageChannel("handoff", 2, cancel_event)
    results: PageChannel[str] = PageChannel("results", 2, cancel_event)
    handoff.put(_page("Kitty", "#REDIRECT [[Cat]]"))
    handoff.close()

    TransformWorker(1, _RecordingTransformer()).run(handoff, results)
    results.close()

    assert "\n" not in next(iter(results))


def test_clean_page_drops_output_with_control_characters() -> None:
    """Terminal escape codes in transformer output cannot be written as XML."""
    transformer = _RecordingTransformer(output="\x1b[33mwarning\x1b[0m Animal.")

    assert clean_page(_page("Dog", "Animal."), transformer) is None


def test_worker_counts_unwritable_output_as_failure() -> None:
    """A page whose cleaned text is not XML-safe is dropped and counted."""
    cancel_event = threading.Event()
    handoff: PageChannel[Page] = PageChannel("handoff", 4, cancel_event)
    results: PageChannel[str] = PageChannel("results", 4, cancel_event)
    handoff.put(_page("Noisy", "Noisy body"))
    handoff.put(_page("Quiet", "Quiet body"))
    handoff.close()

    def clean(text: str) -> str:
        return "\x07" + text if text.startswith("Noisy") else text

    stats = TransformWorker(1, CallableTransformer(clean)).run(handoff, results)
    results.close()
    records = list(results)

    assert (
        len(records) == 1
        and "<title>Quiet</title>" in records[0]
        and stats.transform_failures == 1
        and stats.pages_transformed == 1
    )
