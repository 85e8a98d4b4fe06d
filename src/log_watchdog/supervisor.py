"""
Lifecycle of a single watchdog.

A supervisor runs two loops for its watchdog:

- the watch loop, on the calling thread, blocks on file change notifications
  and pushes newly appended lines into the LineDispatcher;
- the matcher loop, on its own thread, consumes those lines through the
  DebounceMatcher and runs commands on match.

They share nothing but the dispatcher and its ShutdownToken. The matcher
cancels the token when it stops (oneshot done or command failure); shutdown()
cancels it from outside.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from log_watchdog.commands import CommandRunner
from log_watchdog.dispatcher import LineDispatcher, ShutdownToken
from log_watchdog.errors import WatchdogError
from log_watchdog.events import ChangeKind, FileChangeSource
from log_watchdog.matcher import DebounceMatcher
from log_watchdog.models import WatchdogSpec
from log_watchdog.tail import TailReader

logger = logging.getLogger(__name__)

__all__ = ["WatchdogSupervisor"]


class WatchdogSupervisor:
    """
    Own one watchdog end to end.

    Args:
        spec: The watchdog to run
        source_factory: Builds the change notification source for the log file
        poll_interval: Seconds between liveness checks while blocked
    """

    def __init__(
        self,
        spec: WatchdogSpec,
        source_factory: Callable[[Path], Any] = FileChangeSource,
        poll_interval: float = 0.5,
    ):
        self.spec = spec
        self.poll_interval = poll_interval
        self.token = ShutdownToken()
        self._source_factory = source_factory

    @property
    def name(self) -> str:
        return self.spec.name

    def shutdown(self) -> None:
        """Ask both loops to finish; run() then returns normally."""
        logger.debug(f"watchdog::{self.name}: shutdown requested")
        self.token.cancel()

    def run(self) -> str:
        """
        Run the watchdog until it terminates.

        Returns:
            The watchdog name on clean termination

        Raises:
            WatchdogError: The first fatal error, tagged with the watchdog name
        """
        logger.info(f"watchdog::{self.name}: starting")
        try:
            self._run()
        except WatchdogError as e:
            e.tag(self.name)
            raise
        logger.info(f"watchdog::{self.name}: completed")
        return self.name

    def _run(self) -> None:
        spec = self.spec
        source = self._source_factory(spec.log_file)
        tail = TailReader(spec.log_file)
        runner = CommandRunner(spec.output_file)
        dispatcher = LineDispatcher(self.token, poll_interval=self.poll_interval)
        matcher = DebounceMatcher(spec, runner)
        matcher_errors: list[Exception] = []

        def consume() -> None:
            try:
                matcher.consume(dispatcher, self.token)
            except Exception as e:
                matcher_errors.append(e)
                return
            logger.debug(f"watchdog::{spec.name}: matcher finished after {matcher.triggers} trigger(s)")

        matcher_thread = threading.Thread(
            target=consume,
            name=f"log-watchdog-{spec.name}-matcher",
            daemon=True,
        )
        try:
            runner.open()
            matcher_thread.start()
            source.start()
            logger.info(f"watchdog::{spec.name}: watching {spec.log_file}")
            self._watch(source, tail, dispatcher)
        finally:
            source.stop()
            dispatcher.close()
            if matcher_thread.is_alive():
                matcher_thread.join()
            tail.close()
            runner.close()

        if matcher_errors:
            raise matcher_errors[0]

    def _watch(self, source: Any, tail: TailReader, dispatcher: LineDispatcher) -> None:
        while not self.token.cancelled:
            source.check()
            event = source.get(timeout=self.poll_interval)
            if event is None:
                continue
            if event.kind is not ChangeKind.MODIFY:
                logger.debug(f"watchdog::{self.name}: ignoring {event.kind.value} event")
                continue
            for line in tail.iter_lines():
                if not dispatcher.send(line):
                    logger.debug(f"watchdog::{self.name}: matcher stopped, leaving watch loop")
                    return
