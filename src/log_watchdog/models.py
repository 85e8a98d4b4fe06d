"""Immutable watchdog descriptions built from validated configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

__all__ = ["Command", "WatchdogSpec"]


@dataclass(frozen=True)
class Command:
    """An external program and its arguments."""

    name: str
    args: tuple[str, ...] = ()

    @property
    def argv(self) -> list[str]:
        return [self.name, *self.args]


@dataclass(frozen=True)
class WatchdogSpec:
    """
    Everything one watchdog needs to run.

    Built once from configuration and read-only for the lifetime of the
    watchdog. Commands run in the order given.
    """

    name: str
    log_file: Path
    output_file: Path
    debounce: timedelta
    oneshot: bool
    pattern: re.Pattern[str]
    commands: tuple[Command, ...] = field(default_factory=tuple)

    @property
    def debounce_seconds(self) -> float:
        return self.debounce.total_seconds()

    def matches(self, line: str) -> bool:
        """Return True if the pattern matches anywhere in the line."""
        return self.pattern.search(line) is not None
