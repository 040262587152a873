"""
CLI Build Command

Build a Merkle tree from a list of bodies and print the frozen snapshot.

Usage:
    merkle build <capacity> <body>... [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.merkle import FrozenTree, IncrementalBuilder
from core.schemas.bodies import parse_body
from core.schemas.errors import BodyParseException, ErrorCodes, HashTreeException
from hashtree_cli.output import print_error


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a built tree for CLI output."""
    scheme: str = ""
    height: int = 0
    capacity: int = 0
    leaves: int = 0
    root_digest: int | None = None
    values: list[str] = field(default_factory=list)
    tree: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_summary(snapshot: FrozenTree, values: list[Any]) -> BuildSummary:
    """Build a BuildSummary from a frozen snapshot."""
    return BuildSummary(
        scheme=snapshot.scheme.name,
        height=snapshot.height,
        capacity=snapshot.capacity,
        leaves=len(values),
        root_digest=snapshot.root_digest,
        values=[str(v) for v in values],
        tree=str(snapshot),
    )


def print_summary_human(summary: BuildSummary) -> None:
    """Print summary in human-readable format."""
    root = summary.root_digest if summary.root_digest is not None else "*"
    print(f"scheme: {summary.scheme}")
    print(f"height: {summary.height}")
    print(f"leaves: {summary.leaves}/{summary.capacity}")
    print(f"root_digest: {root}")
    print(f"tree: {summary.tree}")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config
    if args.capacity < config.tree.min_capacity:
        print_error(
            HashTreeException(
                f"Minimum size is {config.tree.min_capacity}.",
                code=ErrorCodes.INVALID_ARGUMENT,
                details={"capacity": args.capacity},
            ),
            args.json,
        )
        return EXIT_RUNTIME_ERROR

    try:
        bodies = [parse_body(text) for text in args.bodies]
    except BodyParseException as e:
        print_error(e, args.json)
        return EXIT_RUNTIME_ERROR

    builder = IncrementalBuilder(args.capacity, config.digest_scheme())
    for body in bodies:
        builder.push(body)
    logger.info(f"Built tree of height {builder.height} from {len(builder)} values")

    summary = build_summary(builder.build(), list(builder.values))
    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
