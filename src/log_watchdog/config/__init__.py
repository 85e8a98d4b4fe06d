"""
Configuration package for log-watchdog.

Module structure:
- app.py: AppConfig, LoggingSettings and the YAML loader
- watchdog.py: WatchdogConfig and CommandConfig
"""

from log_watchdog.config.app import (
    AppConfig,
    LoggingSettings,
    apply_cli_overrides,
    load_config,
    load_yaml,
)
from log_watchdog.config.watchdog import CommandConfig, WatchdogConfig

__all__ = [
    "AppConfig",
    "CommandConfig",
    "LoggingSettings",
    "WatchdogConfig",
    "apply_cli_overrides",
    "load_config",
    "load_yaml",
]
