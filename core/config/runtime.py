"""
Runtime Configuration

Central configuration for the hash tree engine and its front-ends:
which digest scheme trees use, the smallest capacity a shell accepts,
and logging.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.crypto.schemes import DigestScheme, get_scheme

load_dotenv()


ENV_PREFIX = "HASHTREE_"


@dataclass
class TreeConfig:
    """Configuration for tree construction."""
    digest_scheme: str = "reference"
    min_capacity: int = 2

    def __post_init__(self):
        if self.min_capacity < 1:
            raise ValueError(f"min_capacity must be positive, got {self.min_capacity}")


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (HASHTREE_* prefix, .env files honored)
    - YAML or JSON file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - HASHTREE_DIGEST_SCHEME: digest scheme name (reference, sha256)
        - HASHTREE_MIN_CAPACITY: smallest capacity accepted by the shell
        - HASHTREE_LOG_LEVEL: log level
        - HASHTREE_LOG_FILE: optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}DIGEST_SCHEME"):
            overrides.setdefault("tree", {})["digest_scheme"] = os.getenv(
                f"{ENV_PREFIX}DIGEST_SCHEME"
            )
        if os.getenv(f"{ENV_PREFIX}MIN_CAPACITY"):
            overrides.setdefault("tree", {})["min_capacity"] = int(
                os.getenv(f"{ENV_PREFIX}MIN_CAPACITY", "2")
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML (.yaml/.yml) or JSON file."""
        path = Path(path)
        if path.suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {})
        logging_data = data.get("logging", {})

        tree = TreeConfig(**tree_data) if tree_data else TreeConfig()
        logging_config = LoggingConfig(**logging_data) if logging_data else LoggingConfig()

        return cls(tree=tree, logging=logging_config)

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            for key, value in overrides["tree"].items():
                setattr(new_config.tree, key, value)

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def digest_scheme(self) -> DigestScheme:
        """
        Resolve the configured digest scheme.

        Raises:
            KeyError: If the configured name is not a registered scheme
        """
        return get_scheme(self.tree.digest_scheme)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "digest_scheme": self.tree.digest_scheme,
                "min_capacity": self.tree.min_capacity,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }

