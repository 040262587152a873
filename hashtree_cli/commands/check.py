"""
CLI Check Command

Verify received values and digests against a trusted root digest.

Usage:
    merkle check <capacity> <root-digest> [--value I=BODY]... [--digest I=D]... [--json]

Exit codes:
    0  ACK - the tree is complete and consistent
    1  runtime error (bad input, index out of range, ...)
    2  REJ - inconsistent, or nodes are still missing
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.merkle import GrowableTree
from core.schemas.bodies import parse_body, parse_integer
from core.schemas.errors import ErrorCodes, HashTreeException
from hashtree_cli.output import print_error


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class CheckSummary:
    """Summary of a verification for CLI output."""
    root_digest: int = 0
    height: int = 0
    missing: list[int] = field(default_factory=list)
    ready: bool = False
    consistent: bool | None = None
    tree: str = ""

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.consistent is None:
            del d["consistent"]
        return d

    @property
    def verdict(self) -> str:
        if not self.ready:
            return "INCOMPLETE"
        return "ACK" if self.consistent else "REJ"


def parse_assignment(text: str) -> tuple[int, str]:
    """
    Split an ``INDEX=VALUE`` argument.

    Raises:
        ValueError: If there is no '=' or the index is not a non-negative integer
    """
    index_text, sep, value = text.partition("=")
    if not sep or not value:
        raise ValueError(f"Expected INDEX=VALUE, got: {text}")
    index = parse_integer(index_text)
    if index < 0:
        raise ValueError(f"Negative numbers are not allowed: {text}")
    return index, value


def apply_inputs(tree: GrowableTree, values: list[str], digests: list[str]) -> None:
    """
    Apply leaf values first, then digests.

    Raises:
        ValueError: On malformed arguments or an attempt to replace the root digest
        HashTreeException: If the tree rejects an index or digest
    """
    for item in values:
        leaf_index, text = parse_assignment(item)
        tree.set_value(leaf_index, parse_body(text))
    for item in digests:
        index, text = parse_assignment(item)
        if index == 0:
            raise ValueError("Root hash cannot be changed.")
        tree.set_digest(index, parse_integer(text))


def print_summary_human(summary: CheckSummary) -> None:
    """Print summary in human-readable format."""
    print(f"root_digest: {summary.root_digest}")
    print(f"height: {summary.height}")
    if summary.missing:
        print("missing: [" + ",".join(str(i) for i in summary.missing) + "]")
    print(f"verdict: {summary.verdict}")


def check_cmd(args: Namespace) -> int:
    """
    Execute the check command.

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

    tree = GrowableTree(args.capacity, config.digest_scheme())
    tree.set_digest(0, args.root_digest)

    try:
        apply_inputs(tree, args.value or [], args.digest or [])
    except HashTreeException as e:
        print_error(e, args.json)
        return EXIT_RUNTIME_ERROR
    except ValueError as e:
        print_error(HashTreeException(str(e), code=ErrorCodes.INVALID_ARGUMENT), args.json)
        return EXIT_RUNTIME_ERROR

    missing = tree.get_missing()
    summary = CheckSummary(
        root_digest=args.root_digest,
        height=tree.height,
        missing=missing,
        ready=not missing,
        tree=str(tree),
    )
    if summary.ready:
        summary.consistent = tree.is_consistent()
    logger.info(f"Verification result: {summary.verdict}")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.verdict == "ACK" else EXIT_VERIFICATION_FAILED
