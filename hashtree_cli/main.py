"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    merkle shell
    merkle build <capacity> <body>... [--json]
    merkle check <capacity> <root-digest> [--value I=BODY]... [--digest I=D]... [--json]
    merkle config --init | --show

Environment Variables:
    HASHTREE_DIGEST_SCHEME      Digest scheme: reference, sha256 (default: reference)
    HASHTREE_MIN_CAPACITY       Smallest accepted capacity (default: 2)
    HASHTREE_LOG_LEVEL          Log level (default: INFO)
    HASHTREE_LOG_FILE           Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from hashtree_cli import __version__
from hashtree_cli.commands import build, check, shell
from hashtree_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle",
        description="Build Merkle hash trees and verify data against a trusted root digest.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./hashtree.json or ~/.config/hashtree/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- shell command ---
    shell_parser = subparsers.add_parser(
        "shell",
        help="Run the interactive shell",
        description="Read shell commands (new, push, new_check, set_val, ...) from stdin.",
    )
    shell_parser.set_defaults(func=shell.shell_cmd)

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree from bodies and print the snapshot",
        description="Push every body into a builder and print the frozen tree.",
    )
    build_parser.add_argument(
        "capacity",
        type=int,
        help="Expected number of leaves (the tree grows if more bodies are given)",
    )
    build_parser.add_argument(
        "bodies",
        nargs="*",
        help='Bodies such as "Cuboid(1,2,3)" or "Cylinder(4,5)"',
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- check command ---
    check_parser = subparsers.add_parser(
        "check",
        help="Verify values and digests against a root digest",
        description="Reconstruct a tree around a trusted root digest and check it.",
    )
    check_parser.add_argument(
        "capacity",
        type=int,
        help="Number of leaves of the tree",
    )
    check_parser.add_argument(
        "root_digest",
        type=int,
        help="Trusted root digest",
    )
    check_parser.add_argument(
        "--value",
        action="append",
        metavar="I=BODY",
        help="Leaf value by leaf index, e.g. 0=Cuboid(1,2,3) (repeatable)",
    )
    check_parser.add_argument(
        "--digest",
        action="append",
        metavar="I=D",
        help="Node digest by BFS index, e.g. 2=17 (repeatable)",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    check_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )
    check_parser.set_defaults(func=check.check_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="hashtree.json",
        help="Path for config file (default: hashtree.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (HASHTREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: merkle config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
        config.digest_scheme()
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
