"""Bounded closable channels between pipeline stages.

This module wraps ``queue.Queue`` with close semantics and cooperative
cancellation so that a failed stage can never leave its peers blocked.
"""

from __future__ import annotations

import queue
import threading
from typing import Generic, Iterator, TypeVar

from core.constants import CHANNEL_POLL_SECONDS
from core.errors import WikiCleanPipelineError

T = TypeVar("T")

_CLOSED = object()


class ChannelClosed(Exception):
    """Raised by ``get`` once a channel is closed and drained."""


class PageChannel(Generic[T]):
    """Bounded FIFO channel with one-shot close and shared cancellation.

    ``close`` enqueues a marker behind any pending items. Each consumer that
    reads the marker puts it back before returning, so every consumer sees
    the closure exactly once the channel is empty.
    """

    def __init__(self, name: str, capacity: int, cancel_event: threading.Event) -> None:
        if capacity < 1:
            raise ValueError(f"Channel capacity must be at least 1, got {capacity}.")
        self.name = name
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=capacity)
        self._cancel_event = cancel_event
        self._closed = False
        self._close_lock = threading.Lock()

    def put(self, item: T) -> None:
        """Push one item, blocking while the channel is full.

        Raises:
            WikiCleanPipelineError: If the channel is closed or the run is cancelled.
        """
        if self._closed:
            raise WikiCleanPipelineError(f"Cannot put on closed channel '{self.name}'.")
        self._blocking_put(item)

    def get(self) -> T:
        """Pop one item, blocking while the channel is empty.

        Raises:
            ChannelClosed: When the channel is closed and fully drained.
            WikiCleanPipelineError: If the run is cancelled.
        """
        while True:
            self._raise_if_cancelled()
            try:
                item = self._queue.get(timeout=CHANNEL_POLL_SECONDS)
            except queue.Empty:
                continue
            if item is _CLOSED:
                # Republish for the remaining consumers.
                self._blocking_put(_CLOSED)
                raise ChannelClosed(self.name)
            return item  # type: ignore[return-value]

    def close(self) -> None:
        """Mark the channel closed. Later calls are no-ops."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._blocking_put(_CLOSED)

    @property
    def closed(self) -> bool:
        """Return whether ``close`` has been called."""
        return self._closed

    def __iter__(self) -> Iterator[T]:
        """Yield items until the channel is closed and drained."""
        while True:
            try:
                yield self.get()
            except ChannelClosed:
                return

    def _blocking_put(self, item: object) -> None:
        """Enqueue an item, waking periodically to honor cancellation.

        Raises:
            WikiCleanPipelineError: If the run is cancelled while waiting.
        """
        while True:
            self._raise_if_cancelled()
            try:
                self._queue.put(item, timeout=CHANNEL_POLL_SECONDS)
            except queue.Full:
                continue
            return

    def _raise_if_cancelled(self) -> None:
        """Raise when the shared cancel flag is set."""
        if self._cancel_event.is_set():
            raise WikiCleanPipelineError(
                f"Channel '{self.name}' aborted: pipeline run was cancelled."
            )
