"""
CLI Error Output

Shared error reporting for the build and check commands.
"""

from __future__ import annotations

import json
import sys

from core.schemas.errors import HashTreeException


def print_error(error: HashTreeException, as_json: bool = False) -> None:
    """
    Report a failed command.

    With ``as_json`` the HashTreeError model is printed to stdout so a
    caller that asked for JSON always gets JSON; otherwise the message
    goes to stderr.
    """
    if as_json:
        print(json.dumps({"error": error.to_error_model().model_dump()}, indent=2))
    else:
        print(f"Error: {error.message}", file=sys.stderr)
