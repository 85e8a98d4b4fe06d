"""
Debounced pattern matching for one watchdog.

Per line:
1. If less than the debounce window has passed since the last check, skip it.
2. Otherwise record the check time, then test the pattern.
3. On match run every command; a oneshot watchdog stops after the first
   successful run, a failed command stops it with an error.

The check time is recorded before the test, so a non-matching line still
restarts the debounce window.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from log_watchdog.dispatcher import LineDispatcher, ShutdownToken
from log_watchdog.errors import WatchdogError
from log_watchdog.models import Command, WatchdogSpec

logger = logging.getLogger(__name__)

__all__ = ["DebounceMatcher", "MatchOutcome", "MatcherState"]


class MatcherState(str, Enum):
    """MATCHED and UNMATCHED record the last evaluation and accept lines like IDLE."""

    IDLE = "idle"
    EVALUATING = "evaluating"
    MATCHED = "matched"
    UNMATCHED = "unmatched"
    STOPPED = "stopped"


class MatchOutcome(str, Enum):
    """Result of feeding one line to the matcher."""

    SKIPPED = "skipped"
    UNMATCHED = "unmatched"
    TRIGGERED = "triggered"
    STOPPED = "stopped"


class Runner(Protocol):
    def run(self, commands: tuple[Command, ...]) -> None: ...


class DebounceMatcher:
    """State machine deciding which lines are tested and when commands run."""

    def __init__(
        self,
        spec: WatchdogSpec,
        runner: Runner,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.spec = spec
        self.runner = runner
        self._clock = clock
        self._debounce = spec.debounce_seconds
        self.last_checked = clock()
        self.state = MatcherState.IDLE
        self.triggers = 0

    @property
    def stopped(self) -> bool:
        return self.state is MatcherState.STOPPED

    def feed(self, line: str) -> MatchOutcome:
        """
        Apply the debounce policy and pattern to one line.

        Raises:
            WatchdogError: If a triggered command fails; the matcher is stopped
            RuntimeError: If the matcher has already stopped
        """
        if self.stopped:
            raise RuntimeError(f"watchdog::{self.spec.name}: matcher already stopped")

        now = self._clock()
        if now - self.last_checked < self._debounce:
            self.state = MatcherState.IDLE
            return MatchOutcome.SKIPPED

        self.state = MatcherState.EVALUATING
        self.last_checked = now

        if not self.spec.matches(line):
            self.state = MatcherState.UNMATCHED
            return MatchOutcome.UNMATCHED

        self.state = MatcherState.MATCHED
        logger.info(f"watchdog::{self.spec.name}: pattern matched, running commands")
        try:
            self.runner.run(self.spec.commands)
        except WatchdogError:
            self.state = MatcherState.STOPPED
            raise

        self.triggers += 1
        if self.spec.oneshot:
            self.state = MatcherState.STOPPED
            logger.info(f"watchdog::{self.spec.name}: oneshot triggered, stopping")
            return MatchOutcome.STOPPED

        return MatchOutcome.TRIGGERED

    def consume(self, lines: LineDispatcher, token: ShutdownToken | None = None) -> str:
        """
        Feed lines from the dispatcher until it closes or the matcher stops.

        The token is cancelled whenever this returns or raises, which tells
        the watch loop that nobody is listening any more.

        Returns:
            The watchdog name
        """
        token = token or lines.token
        try:
            for line in lines:
                if self.feed(line) is MatchOutcome.STOPPED:
                    break
        finally:
            token.cancel()
        return self.spec.name
