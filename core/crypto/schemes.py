"""
Module 02 - Digest Schemes
Injectable (leaf digest, combiner) pairs for the hash tree engine.

The tree engine never hashes anything itself: every LeafNode digest is
``scheme.leaf_digest(value)`` and every InnerNode digest is
``scheme.combine(left, right)``. Swapping the scheme never touches the
engine.

Schemes:
- REFERENCE_SCHEME ("reference"): toy, non-cryptographic.
    leaf    = string_hash32(str(value))
    combine = left * right, wrapped to signed 64 bits
  The combiner is commutative: combine(a, b) == combine(b, a).
- SHA256_SCHEME ("sha256"):
    leaf    = int64(sha256(canonical_json(value)))
    combine = int64(sha256(be8(left) || be8(right)))
  The combiner is order sensitive.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from core.crypto.hashing import (
    hash_canonical,
    int64_from_bytes,
    int64_to_bytes,
    sha256,
    string_hash32,
    wrap_int64,
)


@dataclass(frozen=True)
class DigestScheme:
    """
    A pluggable digest function pair.

    Attributes:
        name: Stable name used by configuration
        leaf_digest: Maps a (non-None) payload to its digest
        combine: Maps (left digest, right digest) to the parent digest
        commutative: Whether combine ignores the order of its arguments
    """
    name: str
    leaf_digest: Callable[[Any], int]
    combine: Callable[[int, int], int]
    commutative: bool


def reference_leaf_digest(value: Any) -> int:
    return string_hash32(str(value))


def reference_combine(left: int, right: int) -> int:
    return wrap_int64(left * right)


def sha256_leaf_digest(value: Any) -> int:
    return int64_from_bytes(hash_canonical(value))


def sha256_combine(left: int, right: int) -> int:
    return int64_from_bytes(sha256(int64_to_bytes(left) + int64_to_bytes(right)))


REFERENCE_SCHEME = DigestScheme(
    name="reference",
    leaf_digest=reference_leaf_digest,
    combine=reference_combine,
    commutative=True,
)

SHA256_SCHEME = DigestScheme(
    name="sha256",
    leaf_digest=sha256_leaf_digest,
    combine=sha256_combine,
    commutative=False,
)

DIGEST_SCHEMES: dict[str, DigestScheme] = {
    REFERENCE_SCHEME.name: REFERENCE_SCHEME,
    SHA256_SCHEME.name: SHA256_SCHEME,
}

DEFAULT_SCHEME = REFERENCE_SCHEME


def get_scheme(name: str) -> DigestScheme:
    """
    Look up a registered digest scheme by name.

    Raises:
        KeyError: If no scheme is registered under ``name``
    """
    try:
        return DIGEST_SCHEMES[name]
    except KeyError:
        raise KeyError(
            f"Unknown digest scheme {name!r}. Available: {sorted(DIGEST_SCHEMES)}"
        ) from None


__all__ = [
    "DigestScheme",
    "REFERENCE_SCHEME",
    "SHA256_SCHEME",
    "DIGEST_SCHEMES",
    "DEFAULT_SCHEME",
    "get_scheme",
    "reference_leaf_digest",
    "reference_combine",
    "sha256_leaf_digest",
    "sha256_combine",
]
