"""Tests for the Orchestrator fail-fast policy."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

import pytest

from log_watchdog.errors import CommandError
from log_watchdog.models import WatchdogSpec
from log_watchdog.orchestrator import Orchestrator

pytestmark = pytest.mark.unit


class StubSupervisor:
    """Supervisor stand-in whose behaviour is chosen by watchdog name."""

    def __init__(self, spec: WatchdogSpec):
        self.spec = spec
        self.name = spec.name
        self.released = threading.Event()
        self.shutdown_called = False

    def run(self) -> str:
        if self.name.startswith("fail"):
            raise CommandError("false", 1, "boom", watchdog=self.name)
        if self.name.startswith("crash"):
            raise RuntimeError("unexpected")
        if self.name.startswith("block"):
            self.released.wait(timeout=10)
        return self.name

    def shutdown(self) -> None:
        self.shutdown_called = True
        self.released.set()


@pytest.fixture
def specs(make_spec: Callable[..., WatchdogSpec]) -> Callable[..., list[WatchdogSpec]]:
    def _specs(*names: str) -> list[WatchdogSpec]:
        return [make_spec(name=name) for name in names]

    return _specs


class TestOrchestrator:
    def test_no_watchdogs_exits_cleanly(self) -> None:
        assert Orchestrator([], supervisor_factory=StubSupervisor).run() == 0

    def test_all_clean_returns_zero(self, specs: Callable[..., list[WatchdogSpec]]) -> None:
        orchestrator = Orchestrator(specs("a", "b", "c"), supervisor_factory=StubSupervisor)
        assert orchestrator.run() == 0
        assert [s.name for s in orchestrator.supervisors] == ["a", "b", "c"]

    def test_failure_returns_non_zero_and_stops_others(
        self,
        specs: Callable[..., list[WatchdogSpec]],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        orchestrator = Orchestrator(specs("block-a", "fail-b"), supervisor_factory=StubSupervisor)

        with caplog.at_level(logging.ERROR, logger="log_watchdog.orchestrator"):
            assert orchestrator.run() == 1

        assert "watchdog failed: watchdog::fail-b: command false failed with exit code 1: boom" in caplog.text
        assert all(s.shutdown_called for s in orchestrator.supervisors)

    def test_unexpected_exception_is_a_failure(
        self,
        specs: Callable[..., list[WatchdogSpec]],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        orchestrator = Orchestrator(specs("crash"), supervisor_factory=StubSupervisor)
        with caplog.at_level(logging.ERROR, logger="log_watchdog.orchestrator"):
            assert orchestrator.run() == 1
        assert "watchdog::crash: failed unexpectedly: unexpected" in caplog.text

    def test_shutdown_releases_running_watchdogs(self, specs: Callable[..., list[WatchdogSpec]]) -> None:
        orchestrator = Orchestrator(specs("block-a", "block-b"), supervisor_factory=StubSupervisor)
        exit_codes: list[int] = []
        thread = threading.Thread(target=lambda: exit_codes.append(orchestrator.run()))
        thread.start()

        orchestrator.shutdown()
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert exit_codes == [0]
