"""
Watchdog configuration module.

Contains the per-watchdog configuration models read from the ``watchdogs``
section of the settings file.
"""

import re
from datetime import timedelta
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from log_watchdog.models import Command, WatchdogSpec

__all__ = ["CommandConfig", "WatchdogConfig"]


class CommandConfig(BaseModel):
    """A command to run when the watchdog triggers."""

    model_config = ConfigDict(extra="forbid")

    args: list[StrictStr] = Field(
        strict=True,
        description="Arguments passed to the program, in order",
    )


class WatchdogConfig(BaseModel):
    """Configuration for one watchdog."""

    model_config = ConfigDict(extra="forbid")

    log_file: str = Field(
        strict=True,
        description="Path to the log file to watch",
    )
    output_file: str = Field(
        strict=True,
        description="Path to the file command output is appended to",
    )
    debounce: int = Field(
        strict=True,
        ge=0,
        description="Minimum milliseconds between pattern checks",
    )
    oneshot: bool = Field(
        strict=True,
        description="Stop the watchdog after the first successful trigger",
    )
    regex: str = Field(
        strict=True,
        description="Pattern searched for in every new log line",
    )
    commands: dict[str, CommandConfig] = Field(
        description="Commands to run on match, keyed by program name, in order",
    )

    @field_validator("regex")
    @classmethod
    def validate_regex(cls, v: str) -> str:
        """Validate the pattern compiles."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regex {v!r}: {e}") from e
        return v

    def to_spec(self, name: str) -> WatchdogSpec:
        """Build the immutable runtime description of this watchdog."""
        return WatchdogSpec(
            name=name,
            log_file=Path(self.log_file).expanduser(),
            output_file=Path(self.output_file).expanduser(),
            debounce=timedelta(milliseconds=self.debounce),
            oneshot=self.oneshot,
            pattern=re.compile(self.regex),
            commands=tuple(
                Command(name=command, args=tuple(cfg.args))
                for command, cfg in self.commands.items()
            ),
        )
