"""Run every configured watchdog concurrently and fail fast."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable
from typing import Any

from log_watchdog.errors import WatchdogError
from log_watchdog.models import WatchdogSpec
from log_watchdog.supervisor import WatchdogSupervisor

logger = logging.getLogger(__name__)

__all__ = ["Orchestrator"]


class Orchestrator:
    """
    Start one supervisor thread per watchdog and wait for all of them.

    Failure policy:
    - The first watchdog error is logged and run() returns 1 straight away.
      Remaining watchdogs are asked to shut down but not waited for.
    - run() returns 0 once every watchdog has finished cleanly, either
      through oneshot completion or after shutdown().

    Supervisor threads are daemon threads so a failing process can exit
    while other watchdogs are still blocked on I/O or a hung command.
    """

    def __init__(
        self,
        specs: Iterable[WatchdogSpec],
        supervisor_factory: Callable[[WatchdogSpec], Any] = WatchdogSupervisor,
    ):
        self.supervisors = [supervisor_factory(spec) for spec in specs]
        self._outcomes: queue.Queue[tuple[str, Exception | None]] = queue.Queue()

    def run(self) -> int:
        """
        Run all watchdogs.

        Returns:
            Process exit status: 0 when all watchdogs finished cleanly, 1 on
            the first failure
        """
        logger.info(f"starting log-watchdog with {len(self.supervisors)} watchdog(s)")
        if not self.supervisors:
            logger.warning("No watchdogs configured, nothing to do")
            return 0

        for supervisor in self.supervisors:
            thread = threading.Thread(
                target=self._run_supervisor,
                args=(supervisor,),
                name=f"log-watchdog-{supervisor.name}",
                daemon=True,
            )
            thread.start()

        remaining = len(self.supervisors)
        while remaining:
            name, error = self._outcomes.get()
            remaining -= 1
            if error is None:
                continue
            if isinstance(error, WatchdogError):
                logger.error(f"watchdog failed: {error}")
            else:
                logger.error(f"watchdog::{name}: failed unexpectedly: {error}", exc_info=error)
            self.shutdown()
            return 1

        logger.info("All watchdogs completed")
        return 0

    def shutdown(self) -> None:
        """Ask every supervisor to stop."""
        for supervisor in self.supervisors:
            supervisor.shutdown()

    def _run_supervisor(self, supervisor: Any) -> None:
        try:
            supervisor.run()
        except Exception as e:
            self._outcomes.put((supervisor.name, e))
            return
        self._outcomes.put((supervisor.name, None))
