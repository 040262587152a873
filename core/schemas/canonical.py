"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic JSON form of leaf payloads, hashed by the sha256
digest scheme.

Rules:
- Keys sorted, no whitespace, UTF-8 kept as is
- Pydantic models are dumped and tagged with their class name under "kind"
- None fields are dropped; NaN and Infinity are rejected
"""

import json
import math
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively turn a payload into plain JSON data.

    Raises:
        CanonicalizationException: On a non-finite float or an unsupported type
    """
    # bool and int pass through unchanged (bool is an int subclass)
    if value is None or isinstance(value, (str, int)):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise CanonicalizationException(
                message=f"Non-finite float value encountered: {value}",
                details={"path": path, "value": str(value)},
            )
        return value

    if isinstance(value, BaseModel):
        dumped = value.model_dump(mode="json", exclude_none=True)
        dumped["kind"] = type(value).__name__
        return canonicalize_value(dumped, path)

    if isinstance(value, dict):
        return {
            k: canonicalize_value(v, f"{path}.{k}" if path else k)
            for k, v in value.items()
            if v is not None
        }

    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, f"{path}[{i}]") for i, item in enumerate(value)]

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize a payload to its canonical JSON string.

    Example:
        >>> dumps_canonical({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    return json.dumps(
        canonicalize_value(obj),
        sort_keys=True,
        separators=CANONICAL_JSON_SEPARATORS,
        ensure_ascii=False,
    )
