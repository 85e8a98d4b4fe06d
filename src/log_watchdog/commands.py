"""
Synchronous execution of a watchdog's command list.

Commands run one after another; the first one that cannot be launched or
exits non-zero aborts the rest. Standard output of each successful command is
appended to the watchdog's output file as one line.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - running configured commands is the point
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from log_watchdog.errors import CommandError, OutputWriteError
from log_watchdog.models import Command

logger = logging.getLogger(__name__)

__all__ = ["CommandRunner"]


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


def _strip_terminator(text: str) -> str:
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


class CommandRunner:
    """
    Run commands and append their output to a single file.

    The output file is opened once in append mode and kept open until
    close(). It is owned by one watchdog and never locked.
    """

    def __init__(self, output_file: Path | str):
        self.output_file = Path(output_file)
        self._out: TextIO | None = None

    def open(self) -> TextIO:
        """
        Open the output file for appending, creating it if needed.

        Returns:
            The open output stream

        Raises:
            OutputWriteError: If the file cannot be opened
        """
        if self._out is not None:
            return self._out
        try:
            self._out = open(self.output_file, "a", encoding="utf-8")
        except OSError as e:
            raise OutputWriteError(f"cannot open output file {self.output_file}: {e}") from e
        return self._out

    def run(self, commands: Sequence[Command]) -> None:
        """
        Execute commands in order, waiting for each to finish.

        Raises:
            CommandError: On the first command that fails; later commands are skipped
            OutputWriteError: If output cannot be written
        """
        out = self.open()
        for command in commands:
            stdout = self._execute(command)
            self._append(out, stdout)

    def _execute(self, command: Command) -> str:
        logger.debug(f"Running command {command.name} {list(command.args)}")
        try:
            result = subprocess.run(  # nosec B603
                command.argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except OSError as e:
            raise CommandError(command.name, None, str(e)) from e

        if result.returncode != 0:
            # Negative return codes mean the process was killed by a signal.
            exit_code = result.returncode if result.returncode > 0 else None
            raise CommandError(command.name, exit_code, _decode(result.stderr))

        return _decode(result.stdout)

    def _append(self, out: TextIO, stdout: str) -> None:
        try:
            out.write(_strip_terminator(stdout) + "\n")
            out.flush()
        except OSError as e:
            raise OutputWriteError(f"cannot write output file {self.output_file}: {e}") from e

    def close(self) -> None:
        if self._out is not None:
            self._out.close()
            self._out = None

    def __enter__(self) -> CommandRunner:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
