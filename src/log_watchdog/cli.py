"""
log-watchdog CLI entry point.
"""

import logging
import signal
import sys
from typing import Any

import click

from log_watchdog import __version__
from log_watchdog.config import AppConfig, load_config
from log_watchdog.orchestrator import Orchestrator
from log_watchdog.utils.logging import setup_logging

logger = logging.getLogger(__name__)

SETTINGS_HELP = """Settings file used to configure the watchdogs (YAML).

\b
  watchdogs:
    watchdog_name:
      log_file: path/to/log/file.log
      output_file: path/to/output/file.txt
      debounce: 1000
      oneshot: false
      regex: .*
      commands:
        curl:
          args:
            - https://example.com
            - -v
"""


def _load_settings(settings: str, cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    try:
        return load_config(settings, cli_overrides)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--settings'") from e


@click.group()
@click.version_option(__version__, prog_name="log-watchdog")
def cli() -> None:
    """log-watchdog - run commands when new log lines match a pattern."""


@cli.command()
@click.option(
    "--settings",
    "-s",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help=SETTINGS_HELP,
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose debug output",
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Log output format (overrides the settings file)",
)
def run(settings: str, verbose: bool, log_format: str | None) -> None:
    """Watch the configured log files and run commands on match."""
    config = _load_settings(
        settings,
        {
            "logging.level": "debug" if verbose else None,
            "logging.format": log_format,
        },
    )
    setup_logging(config.logging.level, config.logging.format)

    orchestrator = Orchestrator(config.to_specs())

    def _handle_shutdown(signum: int, frame: object) -> None:
        logger.info(f"Received signal {signum}, shutting down watchdogs")
        orchestrator.shutdown()

    signal.signal(signal.SIGTERM, _handle_shutdown)
    signal.signal(signal.SIGINT, _handle_shutdown)

    sys.exit(orchestrator.run())


@cli.command()
@click.option(
    "--settings",
    "-s",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Settings file to check",
)
def validate(settings: str) -> None:
    """Check a settings file and list the watchdogs it defines."""
    config = _load_settings(settings)
    specs = config.to_specs()
    for spec in specs:
        click.echo(
            f"{spec.name}: {spec.log_file} "
            f"(debounce={round(spec.debounce_seconds * 1000)}ms, "
            f"oneshot={str(spec.oneshot).lower()}, "
            f"commands={len(spec.commands)})"
        )
    click.echo(f"{len(specs)} watchdog(s) configured")
