"""
File change notifications for a single watched file.

Wraps a ``watchdog`` observer and turns its callbacks into a queue of
classified ChangeEvent values that a watch loop can block on.
"""

from __future__ import annotations

import logging
import os
import queue
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from log_watchdog.errors import NotificationError

logger = logging.getLogger(__name__)

__all__ = ["ChangeEvent", "ChangeKind", "FileChangeSource", "classify"]


class ChangeKind(str, Enum):
    """What happened to the watched file."""

    MODIFY = "modify"
    ACCESS = "access"
    CREATE = "create"
    REMOVE = "remove"
    OTHER = "other"


_EVENT_KINDS: dict[str, ChangeKind] = {
    "modified": ChangeKind.MODIFY,
    "opened": ChangeKind.ACCESS,
    "closed": ChangeKind.ACCESS,
    "closed_no_write": ChangeKind.ACCESS,
    "created": ChangeKind.CREATE,
    "deleted": ChangeKind.REMOVE,
    "moved": ChangeKind.REMOVE,
}


def classify(event_type: str) -> ChangeKind:
    """Map a watchdog event type onto a ChangeKind."""
    return _EVENT_KINDS.get(event_type, ChangeKind.OTHER)


@dataclass(frozen=True)
class ChangeEvent:
    """A classified notification for the watched path."""

    kind: ChangeKind
    path: Path


class _ForwardingHandler(FileSystemEventHandler):
    """Forward events for one file into a queue, dropping everything else."""

    def __init__(self, target: Path, sink: queue.Queue[ChangeEvent]):
        super().__init__()
        self._target = os.fspath(target)
        self._sink = sink

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        paths = [os.fsdecode(event.src_path)]
        dest = getattr(event, "dest_path", None)
        if dest:
            paths.append(os.fsdecode(dest))
        if self._target not in (os.path.abspath(p) for p in paths):
            return
        self._sink.put(ChangeEvent(classify(event.event_type), Path(self._target)))


class FileChangeSource:
    """
    Deliver change notifications for one file.

    The parent directory is watched non-recursively and events for sibling
    files are discarded, which keeps working when the file is replaced.

    Args:
        path: File to watch
        observer_factory: Callable returning a watchdog observer. Defaults to
            the platform's native observer; tests may pass PollingObserver.
    """

    def __init__(
        self,
        path: Path | str,
        observer_factory: Callable[[], Any] = Observer,
    ):
        self.path = Path(path).resolve()
        self._observer_factory = observer_factory
        self._observer: Any | None = None
        self._events: queue.Queue[ChangeEvent] = queue.Queue()
        self._stopping = False

    def start(self) -> None:
        """
        Start the observer thread.

        Raises:
            NotificationError: If the watch cannot be established
        """
        if self._observer is not None:
            return
        handler = _ForwardingHandler(self.path, self._events)
        observer = self._observer_factory()
        try:
            observer.schedule(handler, os.fspath(self.path.parent), recursive=False)
            observer.start()
        except Exception as e:
            raise NotificationError(f"cannot watch {self.path}: {e}") from e
        self._observer = observer
        logger.debug(f"Watching {self.path} with {type(observer).__name__}")

    def get(self, timeout: float | None = None) -> ChangeEvent | None:
        """Block for the next event; return None if none arrived within timeout."""
        try:
            return self._events.get(timeout=timeout)
        except queue.Empty:
            return None

    def check(self) -> None:
        """
        Raise if the observer stopped delivering notifications.

        Events are produced by emitter threads owned by the observer. An
        emitter can die (an exception, or the watched directory going away)
        while the observer thread itself keeps running.

        Raises:
            NotificationError: If the observer or one of its emitters died
                while still in use
        """
        if self._observer is None or self._stopping:
            return
        if not self._observer.is_alive():
            raise NotificationError(f"notification source for {self.path} stopped unexpectedly")
        if any(not emitter.is_alive() for emitter in self._observer.emitters):
            raise NotificationError(f"event emitter for {self.path} stopped unexpectedly")

    def stop(self) -> None:
        if self._observer is None:
            return
        self._stopping = True
        observer, self._observer = self._observer, None
        observer.stop()
        if observer.is_alive():
            observer.join(timeout=5.0)

    def __enter__(self) -> FileChangeSource:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
