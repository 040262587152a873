"""
CLI command modules.
"""

from hashtree_cli.commands import build, check, shell

__all__ = ["build", "check", "shell"]
