"""
Fatal watchdog errors.

Every error that ends a watchdog derives from WatchdogError. Supervisors tag
the error with the owning watchdog's name before it reaches the orchestrator.
"""

from __future__ import annotations

__all__ = [
    "CommandError",
    "LogReadError",
    "NotificationError",
    "OutputWriteError",
    "WatchdogError",
]


class WatchdogError(Exception):
    """Base class for conditions that terminate a watchdog."""

    def __init__(self, message: str, watchdog: str | None = None):
        super().__init__(message)
        self.message = message
        self.watchdog = watchdog

    def tag(self, watchdog: str) -> WatchdogError:
        """Attach the owning watchdog's name, keeping an existing tag."""
        if self.watchdog is None:
            self.watchdog = watchdog
        return self

    def __str__(self) -> str:
        if self.watchdog:
            return f"watchdog::{self.watchdog}: {self.message}"
        return self.message


class LogReadError(WatchdogError):
    """The watched log file could not be opened or read."""


class OutputWriteError(WatchdogError):
    """The output file could not be opened or written."""


class NotificationError(WatchdogError):
    """The file change notification source failed."""


class CommandError(WatchdogError):
    """An external command could not be launched or exited non-zero."""

    def __init__(
        self,
        command: str,
        exit_code: int | None,
        stderr: str,
        watchdog: str | None = None,
    ):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(
            f"command {command} failed with exit code {exit_code}: {stderr}",
            watchdog=watchdog,
        )
