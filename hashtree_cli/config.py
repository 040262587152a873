"""
CLI Configuration

Locates and loads the runtime configuration for the CLI.
Supports configuration files and environment variables.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.config import RuntimeConfig


DEFAULT_CONFIG_NAMES = ("hashtree.json", "hashtree.yaml", ".hashtree.json")


def default_config_paths() -> list[Path]:
    """Config file locations checked when no explicit path is given."""
    paths = [Path.cwd() / name for name in DEFAULT_CONFIG_NAMES]
    paths.append(Path.home() / ".config" / "hashtree" / "config.json")
    return paths


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to a JSON or YAML config file

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = RuntimeConfig.from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = RuntimeConfig.from_file(default_path)
                break

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"
