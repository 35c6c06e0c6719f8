"""Clean pipeline orchestration.

This module wires the decoder, the transform worker pool, and the writer
through two bounded channels, and owns the run lifecycle and shutdown order.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable, Literal, TypeVar

from core.channel import PageChannel
from core.config import WikiCleanConfig
from core.errors import WikiCleanConfigError, WikiCleanError, WikiCleanPipelineError
from core.logging_config import get_logger
from core.types import (
    DecoderStats,
    Page,
    PipelineOptions,
    PipelineSummary,
    WorkerStats,
    WriterStats,
)
from ingest.dump_reader import DumpDecoder
from store.dump_writer import DumpWriter
from transforms.page_cleaning import TransformWorker
from transforms.page_deduplication import TitleDeduplicator
from transforms.text_transformer import (
    SubprocessTransformer,
    TextTransformer,
    default_transformer_path,
)

_LOGGER = get_logger(__name__)

T = TypeVar("T")

PipelineState = Literal["idle", "running", "draining", "done", "failed", "cancelled"]
ALLOWED_STATE_TRANSITIONS: dict[PipelineState, tuple[PipelineState, ...]] = {
    "idle": ("running",),
    "running": ("draining", "failed", "cancelled"),
    "draining": ("done", "failed", "cancelled"),
    "done": (),
    "failed": (),
    "cancelled": (),
}


class CleanPipelineRunner:
    """Single-use runner for one decode, transform, write pass."""

    def __init__(
        self,
        options: PipelineOptions,
        config: WikiCleanConfig,
        transformer: TextTransformer | None = None,
    ) -> None:
        if options.workers < 1:
            raise WikiCleanConfigError(
                f"Invalid worker count {options.workers}: expected at least 1."
            )
        self._options = options
        self._queue_size = options.queue_size or config.queue_size
        self._transformer = transformer or _build_subprocess_transformer(options, config)
        self._cancel_event = threading.Event()
        self._cancel_requested = False
        self._state: PipelineState = "idle"
        self._state_lock = threading.Lock()
        self._errors: list[WikiCleanError] = []
        self._errors_lock = threading.Lock()

    @property
    def state(self) -> PipelineState:
        """Return the current lifecycle state."""
        return self._state

    def cancel(self) -> None:
        """Ask every stage to stop at its next channel operation."""
        self._cancel_requested = True
        self._cancel_event.set()

    def run(self) -> PipelineSummary:
        """Execute the pipeline to completion.

        Returns:
            End-of-run counts.

        Raises:
            WikiCleanError: The first fatal error raised by any stage.
        """
        self._transition("running")
        handoff: PageChannel[Page] = PageChannel("handoff", self._queue_size, self._cancel_event)
        results: PageChannel[str] = PageChannel("results", self._queue_size, self._cancel_event)
        worker_stats: dict[int, WorkerStats] = {}
        writer_stats: dict[str, WriterStats] = {}

        worker_threads = [
            self._start_stage(
                f"worker-{worker_id}",
                _bind_result(
                    worker_stats,
                    worker_id,
                    TransformWorker(worker_id, self._transformer).run,
                    handoff,
                    results,
                ),
            )
            for worker_id in range(1, self._options.workers + 1)
        ]
        writer = DumpWriter(Path(self._options.output_path))
        writer_thread = self._start_stage(
            "writer", _bind_result(writer_stats, "writer", writer.run, results)
        )

        decoder = DumpDecoder(Path(self._options.input_path), TitleDeduplicator())
        decoder_stats = self._run_stage("decoder", lambda: decoder.run(handoff))
        if decoder_stats is not None:
            self._transition("draining")

        # Barrier: the result channel closes only after every worker exits.
        for thread in worker_threads:
            thread.join()
        if not self._cancel_event.is_set():
            self._run_stage("coordinator", results.close)
        writer_thread.join()

        if self._errors:
            self._finish_with_error()
        self._transition("done")
        summary = _build_summary(
            decoder_stats or DecoderStats(),
            list(worker_stats.values()),
            writer_stats.get("writer", WriterStats()),
        )
        _log_pipeline_completion(self._options, summary)
        return summary

    def _start_stage(self, name: str, target: Callable[[], object]) -> threading.Thread:
        """Start one stage on a daemon thread.

        Args:
            name: Stage name used for the thread and in failure logs.
            target: Stage body.

        Returns:
            The started thread.
        """
        thread = threading.Thread(
            target=self._run_stage,
            args=(name, target),
            name=name,
            daemon=True,
        )
        thread.start()
        return thread

    def _run_stage(self, name: str, target: Callable[[], T]) -> T | None:
        """Run one stage body and record any failure instead of raising.

        Args:
            name: Stage name.
            target: Stage body.

        Returns:
            The stage result, or None when the stage failed.
        """
        try:
            return target()
        except WikiCleanError as error:
            self._record_failure(name, error)
        except Exception as error:
            crash = WikiCleanPipelineError(f"Stage '{name}' crashed: {error!r}")
            crash.__cause__ = error
            self._record_failure(name, crash)
        return None

    def _record_failure(self, stage: str, error: WikiCleanError) -> None:
        """Store a stage error and cancel every other stage.

        Only the first failure is logged as an error; later ones are the
        aborts it caused.
        """
        with self._errors_lock:
            first_failure = not self._cancel_event.is_set()
            self._errors.append(error)
            self._cancel_event.set()
        if first_failure:
            _LOGGER.error("stage_failed", stage=stage, error=str(error))
        else:
            _LOGGER.debug("stage_aborted", stage=stage, error=str(error))

    def _finish_with_error(self) -> None:
        """Move to the terminal error state and raise.

        Raises:
            WikiCleanPipelineError: If the run was cancelled by the caller.
            WikiCleanError: The first recorded stage error otherwise.
        """
        root_error = self._errors[0]
        if self._cancel_requested:
            self._transition("cancelled")
            _LOGGER.warning("pipeline_cancelled", input_path=self._options.input_path)
            raise WikiCleanPipelineError("Pipeline run was cancelled.") from root_error
        self._transition("failed")
        _LOGGER.error(
            "pipeline_failed",
            input_path=self._options.input_path,
            output_path=self._options.output_path,
            error=str(root_error),
        )
        raise root_error

    def _transition(self, next_state: PipelineState) -> None:
        """Apply one lifecycle transition.

        Raises:
            WikiCleanPipelineError: If the transition is not allowed.
        """
        with self._state_lock:
            if next_state not in ALLOWED_STATE_TRANSITIONS[self._state]:
                raise WikiCleanPipelineError(
                    f"Invalid pipeline transition {self._state} -> {next_state}. "
                    "Create a new runner for each run."
                )
            self._state = next_state


def clean_dump(
    options: PipelineOptions,
    config: WikiCleanConfig | None = None,
    transformer: TextTransformer | None = None,
) -> PipelineSummary:
    """Run the clean pipeline over one dump.

    Args:
        options: Run options.
        config: Runtime configuration, read from environment when omitted.
        transformer: Optional transformer backend; defaults to the executable.

    Returns:
        End-of-run counts.

    Raises:
        WikiCleanError: If any stage fails fatally.
    """
    runner = CleanPipelineRunner(options, config or WikiCleanConfig.from_env(), transformer)
    return runner.run()


def _bind_result(
    sink: dict[Any, Any],
    key: object,
    target: Callable[..., T],
    *args: object,
) -> Callable[[], T]:
    """Wrap a stage call so its return value lands in ``sink[key]``."""

    def run() -> T:
        result = target(*args)
        sink[key] = result
        return result

    return run


def _build_subprocess_transformer(
    options: PipelineOptions,
    config: WikiCleanConfig,
) -> SubprocessTransformer:
    """Build the executable backend from options, config, or the default path.

    Args:
        options: Run options, checked first.
        config: Runtime configuration, checked second.

    Returns:
        Subprocess transformer for the resolved executable.
    """
    if options.transformer_path:
        executable = Path(options.transformer_path).expanduser().resolve()
    elif config.transformer_path is not None:
        executable = config.transformer_path
    else:
        executable = default_transformer_path(Path(options.input_path))
    if not executable.is_file():
        _LOGGER.warning("transformer_not_found", transformer_path=str(executable))
    timeout = options.transform_timeout or config.transform_timeout
    return SubprocessTransformer(executable, timeout=timeout)


def _build_summary(
    decoder_stats: DecoderStats,
    worker_stats: list[WorkerStats],
    writer_stats: WriterStats,
) -> PipelineSummary:
    """Merge per-stage counters into the run summary."""
    return PipelineSummary(
        pages_decoded=decoder_stats.pages_decoded,
        duplicates_skipped=decoder_stats.duplicates_skipped,
        untitled_skipped=decoder_stats.untitled_skipped,
        redirects_passed=sum(stats.redirects_passed for stats in worker_stats),
        pages_transformed=sum(stats.pages_transformed for stats in worker_stats),
        transform_failures=sum(stats.transform_failures for stats in worker_stats),
        pages_written=writer_stats.pages_written,
    )


def _log_pipeline_completion(options: PipelineOptions, summary: PipelineSummary) -> None:
    """Log pipeline completion with contextual metadata."""
    _LOGGER.info(
        "pipeline_completed",
        input_path=options.input_path,
        output_path=options.output_path,
        workers=options.workers,
        pages_decoded=summary.pages_decoded,
        duplicates_skipped=summary.duplicates_skipped,
        untitled_skipped=summary.untitled_skipped,
        redirects_passed=summary.redirects_passed,
        pages_transformed=summary.pages_transformed,
        transform_failures=summary.transform_failures,
        pages_written=summary.pages_written,
    )
