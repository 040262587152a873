"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module:
payload bodies, canonical serialization and the error taxonomy.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    BodyParseException,
    CanonicalizationException,
    ErrorCodes,
    HashTreeError,
    HashTreeException,
    IndexOutOfRangeException,
    TypeMismatchException,
    UnsupportedOperationException,
    ValueConflictException,
)

# Payload bodies
from .bodies import (
    BODY_TYPES,
    Body,
    Cuboid,
    Cylinder,
    parse_body,
    parse_integer,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "BodyParseException",
    "CanonicalizationException",
    "ErrorCodes",
    "HashTreeError",
    "HashTreeException",
    "IndexOutOfRangeException",
    "TypeMismatchException",
    "UnsupportedOperationException",
    "ValueConflictException",
    # Bodies
    "BODY_TYPES",
    "Body",
    "Cuboid",
    "Cylinder",
    "parse_body",
    "parse_integer",
]
