"""Pytest configuration and shared fixtures for log-watchdog tests."""

from __future__ import annotations

import queue
import re
import time
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any

import pytest

from log_watchdog.errors import NotificationError
from log_watchdog.events import ChangeEvent, ChangeKind
from log_watchdog.models import Command, WatchdogSpec

SETTINGS_TEMPLATE = """\
watchdogs:
  stdout_txt:
    log_file: {log_file}
    output_file: {output_file}
    debounce: {debounce}
    oneshot: {oneshot}
    regex: "{regex}"
    commands:
      echo:
        args:
          - "hello world!"
"""


class RecordingRunner:
    """CommandRunner stand-in that records every run."""

    def __init__(self, error: Exception | None = None):
        self.calls: list[tuple[Command, ...]] = []
        self.error = error

    def run(self, commands: tuple[Command, ...]) -> None:
        self.calls.append(tuple(commands))
        if self.error is not None:
            raise self.error


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class FakeChangeSource:
    """FileChangeSource stand-in driven by the test."""

    def __init__(self, path: Path):
        self.path = path
        self.events: queue.Queue[ChangeEvent] = queue.Queue()
        self.started = False
        self.stopped = False
        self.fail_check = False

    def push(self, kind: ChangeKind = ChangeKind.MODIFY) -> None:
        self.events.put(ChangeEvent(kind, self.path))

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def check(self) -> None:
        if self.fail_check:
            raise NotificationError("observer died")

    def get(self, timeout: float | None = None) -> ChangeEvent | None:
        try:
            return self.events.get(timeout=timeout)
        except queue.Empty:
            return None


def wait_for(predicate: Callable[[], Any], timeout: float = 5.0, interval: float = 0.02) -> bool:
    """Poll until predicate() is truthy or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return bool(predicate())


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """An empty log file."""
    path = tmp_path / "log.txt"
    path.touch()
    return path


@pytest.fixture
def output_file(tmp_path: Path) -> Path:
    return tmp_path / "out.txt"


@pytest.fixture
def make_spec(log_file: Path, output_file: Path) -> Callable[..., WatchdogSpec]:
    """Build a WatchdogSpec with test-friendly defaults."""

    def _make(
        name: str = "test",
        regex: str = "^aaa",
        debounce_ms: int = 0,
        oneshot: bool = True,
        commands: tuple[Command, ...] | None = None,
        **overrides: Any,
    ) -> WatchdogSpec:
        if commands is None:
            commands = (Command("echo", ("hello world!",)),)
        fields: dict[str, Any] = {
            "name": name,
            "log_file": log_file,
            "output_file": output_file,
            "debounce": timedelta(milliseconds=debounce_ms),
            "oneshot": oneshot,
            "pattern": re.compile(regex),
            "commands": commands,
        }
        fields.update(overrides)
        return WatchdogSpec(**fields)

    return _make


@pytest.fixture
def write_settings(tmp_path: Path, log_file: Path, output_file: Path) -> Callable[..., Path]:
    """Write a single-watchdog settings file and return its path."""

    def _write(
        debounce: int = 0,
        oneshot: bool = True,
        regex: str = "^aaa",
        name: str = "settings.yml",
    ) -> Path:
        path = tmp_path / name
        path.write_text(
            SETTINGS_TEMPLATE.format(
                log_file=log_file,
                output_file=output_file,
                debounce=debounce,
                oneshot=str(oneshot).lower(),
                regex=regex,
            )
        )
        return path

    return _write


def append(path: Path, text: str) -> None:
    """Append raw text to a file."""
    with open(path, "a", encoding="utf-8", newline="") as f:
        f.write(text)
