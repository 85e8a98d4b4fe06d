"""Allows ``python -m log_watchdog``."""

from log_watchdog.cli import cli

if __name__ == "__main__":
    cli()
