"""
Line hand-off between the watch loop and the matcher loop.

One LineDispatcher carries lines from exactly one producer (the watch loop
driving the TailReader) to exactly one consumer (the DebounceMatcher). The
ShutdownToken travels alongside it and is the only liveness signal: the
matcher cancels it when it stops, the supervisor cancels it on external
termination, and both loops check it on every iteration.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterator

__all__ = ["LineDispatcher", "ShutdownToken"]

_CLOSED = object()


class ShutdownToken:
    """Cooperative cancellation flag shared by one watchdog's loops."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class LineDispatcher:
    """Unbounded FIFO channel of lines with an explicit close."""

    def __init__(self, token: ShutdownToken | None = None, poll_interval: float = 0.5):
        self.token = token or ShutdownToken()
        self.poll_interval = poll_interval
        self._queue: queue.SimpleQueue[object] = queue.SimpleQueue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, line: str) -> bool:
        """
        Queue a line for the consumer.

        Returns:
            False if the consumer has gone away (token cancelled) or the
            channel was closed; the line is dropped in that case.
        """
        if self._closed or self.token.cancelled:
            return False
        self._queue.put(line)
        return True

    def close(self) -> None:
        """Close the sending side; the consumer drains what is queued, then stops."""
        if not self._closed:
            self._closed = True
            self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[str]:
        while not self.token.cancelled:
            try:
                item = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]
