"""
CLI Shell Command

Run the interactive shell on standard input and output.

Usage:
    merkle shell
"""

from __future__ import annotations

import sys
from argparse import Namespace

from hashtree_cli.shell import Shell


EXIT_SUCCESS = 0


def shell_cmd(args: Namespace) -> int:
    """
    Execute the shell command.

    Args:
        args: Parsed command-line arguments (uses args.cli_config)

    Returns:
        Exit code
    """
    Shell(sys.stdin, sys.stdout, config=args.cli_config).run()
    return EXIT_SUCCESS
