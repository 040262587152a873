"""
Runtime Configuration Module

Provides configuration loading and management for the hash tree engine.
"""

from .runtime import (
    ENV_PREFIX,
    LoggingConfig,
    RuntimeConfig,
    TreeConfig,
)

__all__ = [
    "ENV_PREFIX",
    "LoggingConfig",
    "RuntimeConfig",
    "TreeConfig",
]
