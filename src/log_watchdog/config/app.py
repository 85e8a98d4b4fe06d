"""
Configuration management for log-watchdog.

Provides YAML-based configuration with CLI overrides,
configuration hierarchy (CLI > YAML > Defaults), and validation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from log_watchdog.config.watchdog import WatchdogConfig
from log_watchdog.models import WatchdogSpec


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Log level",
    )
    format: Literal["text", "json"] = Field(
        default="json",
        description="Log format (text or json)",
    )


class AppConfig(BaseModel):
    """
    Main configuration for log-watchdog.

    Configuration is loaded with the following priority:
    1. CLI arguments (highest)
    2. YAML settings file
    3. Defaults (lowest)

    The ``watchdogs`` section has no default; every watchdog field is required.
    """

    watchdogs: dict[str, WatchdogConfig] = Field(
        description="Watchdogs keyed by name",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    def to_specs(self) -> list[WatchdogSpec]:
        """Return runtime watchdog descriptions in configuration order."""
        return [cfg.to_spec(name) for name, cfg in self.watchdogs.items()]


def load_yaml(config_file: str | Path) -> dict[str, Any]:
    """
    Load a YAML settings file.

    Args:
        config_file: Path to YAML settings file

    Returns:
        Dictionary with parsed YAML content

    Raises:
        ValueError: If the file is missing, has the wrong extension, or the
            YAML is invalid or not a mapping
    """
    config_path = Path(config_file).expanduser()

    if not config_path.is_file():
        raise ValueError(f"Settings file not found: {config_path}")

    # Validate file extension matches format
    file_ext = config_path.suffix.lower()
    if file_ext not in [".yaml", ".yml"]:
        raise ValueError(
            f"Settings file must have .yaml or .yml extension, got: {file_ext}\n"
            f"File: {config_path}"
        )

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in settings file: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping, got {type(data).__name__}")
    return data


def apply_cli_overrides(
    config_dict: dict[str, Any],
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Apply CLI argument overrides to config dictionary.

    Args:
        config_dict: Configuration dictionary
        cli_overrides: Dictionary of CLI overrides; dotted keys such as
            ``logging.level`` address nested sections. None values are skipped.

    Returns:
        Configuration dictionary with CLI overrides applied
    """
    if cli_overrides is None:
        return config_dict

    for key, value in cli_overrides.items():
        if value is None:
            continue
        parts = key.split(".")
        current = config_dict
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    return config_dict


def load_config(
    config_file: str | Path,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with hierarchy: CLI > YAML > Defaults.

    Args:
        config_file: Path to YAML settings file
        cli_overrides: Dictionary of CLI argument overrides

    Returns:
        Validated AppConfig instance

    Raises:
        ValueError: If configuration is invalid or required fields are missing
    """
    config_dict = load_yaml(config_file)
    config_dict = apply_cli_overrides(config_dict, cli_overrides)

    try:
        return AppConfig(**config_dict)
    except Exception as e:
        raise ValueError(
            f"Configuration validation failed: {e}\n"
            f"Please check your settings file at {config_file}"
        ) from e
