"""
Module 02 - Hashing Utilities
Basic hashing primitives used by the digest schemes.

This module provides:
- SHA-256 hashing for raw bytes
- Canonical hashing for objects (via dumps_canonical)
- The 32-bit polynomial string hash used by the reference scheme
- Conversions between bytes and signed 64-bit digests

Determinism Notes:
- All operations are deterministic across runs and platforms
- Python's builtin hash() is salted per process and is never used here
"""
from __future__ import annotations

import hashlib
from typing import Any

from core.schemas.canonical import dumps_canonical


INT32_MASK = 0xFFFFFFFF
INT64_MASK = 0xFFFFFFFFFFFFFFFF


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_canonical(obj: Any) -> bytes:
    """
    Hash an object using canonical JSON serialization.

    Rule: sha256(dumps_canonical(obj).encode("utf-8"))

    Raises:
        CanonicalizationException: If object cannot be canonically serialized
    """
    canonical_json = dumps_canonical(obj)
    return sha256(canonical_json.encode("utf-8"))


def wrap_int32(value: int) -> int:
    """Wrap an arbitrary integer into the signed 32-bit range."""
    value &= INT32_MASK
    return value - (1 << 32) if value & (1 << 31) else value


def wrap_int64(value: int) -> int:
    """Wrap an arbitrary integer into the signed 64-bit range."""
    value &= INT64_MASK
    return value - (1 << 64) if value & (1 << 63) else value


def string_hash32(text: str) -> int:
    """
    Compute the 32-bit polynomial string hash ``h = 31 * h + c``.

    ``c`` runs over UTF-16 code units, so characters outside the BMP
    contribute two units (a surrogate pair). The result is signed.

    Example:
        >>> string_hash32("")
        0
        >>> string_hash32("a")
        97
    """
    h = 0
    units = text.encode("utf-16-be")
    for i in range(0, len(units), 2):
        h = (31 * h + ((units[i] << 8) | units[i + 1])) & INT32_MASK
    return wrap_int32(h)


def int64_from_bytes(data: bytes) -> int:
    """Read the first 8 bytes of ``data`` as a big-endian signed integer."""
    if len(data) < 8:
        raise ValueError(f"Need at least 8 bytes, got {len(data)}")
    return int.from_bytes(data[:8], "big", signed=True)


def int64_to_bytes(value: int) -> bytes:
    """Encode a signed 64-bit integer as 8 big-endian bytes."""
    return wrap_int64(value).to_bytes(8, "big", signed=True)


__all__ = [
    "INT32_MASK",
    "INT64_MASK",
    "sha256",
    "hash_canonical",
    "wrap_int32",
    "wrap_int64",
    "string_hash32",
    "int64_from_bytes",
    "int64_to_bytes",
]
