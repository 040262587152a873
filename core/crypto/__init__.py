"""
Core cryptographic utilities.

Module 02 provides hashing primitives and the pluggable digest schemes
used by the hash tree engine.
"""
from .hashing import (
    sha256,
    hash_canonical,
    string_hash32,
    wrap_int32,
    wrap_int64,
    int64_from_bytes,
    int64_to_bytes,
)
from .schemes import (
    DEFAULT_SCHEME,
    DIGEST_SCHEMES,
    REFERENCE_SCHEME,
    SHA256_SCHEME,
    DigestScheme,
    get_scheme,
)

__all__ = [
    "sha256",
    "hash_canonical",
    "string_hash32",
    "wrap_int32",
    "wrap_int64",
    "int64_from_bytes",
    "int64_to_bytes",
    "DEFAULT_SCHEME",
    "DIGEST_SCHEMES",
    "REFERENCE_SCHEME",
    "SHA256_SCHEME",
    "DigestScheme",
    "get_scheme",
]
