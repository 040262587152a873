"""
Module 01 - Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for the hash tree engine and its front-ends.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every tree error is a precondition violation: it is raised before any
node is touched, so the tree is always left unchanged.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the project."""

    # Tree addressing & mutation errors
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    VALUE_CONFLICT = "VALUE_CONFLICT"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    TYPE_MISMATCH = "TYPE_MISMATCH"

    # Front-end input errors
    INVALID_ARGUMENT = "INVALID_ARGUMENT"

    # Payload errors
    BODY_PARSE_ERROR = "BODY_PARSE_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class HashTreeError(BaseModel):
    """
    Base error model for structured error communication.

    The CLI emits it as the JSON error report of `build --json` and
    `check --json`.
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INDEX_OUT_OF_RANGE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class HashTreeException(Exception):
    """
    Base exception for all hash tree errors.

    This exception carries structured error information and converts
    to a HashTreeError model for JSON output.
    """

    def __init__(
        self,
        message: str,
        code: str = "HASHTREE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> HashTreeError:
        """Convert this exception to a HashTreeError model."""
        return HashTreeError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class IndexOutOfRangeException(HashTreeException, IndexError):
    """Raised when a BFS or leaf index lies outside the current tree."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        limit: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        if limit is not None:
            full_details["limit"] = limit
        super().__init__(
            message=message,
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
        )


class ValueConflictException(HashTreeException, ValueError):
    """Raised when a digest is pinned on a leaf that already holds a value."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCodes.VALUE_CONFLICT,
            details=full_details,
        )


class UnsupportedOperationException(HashTreeException):
    """Raised by every mutating call on a frozen tree."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if operation:
            full_details["operation"] = operation
        super().__init__(
            message=message,
            code=ErrorCodes.UNSUPPORTED_OPERATION,
            details=full_details,
        )


class TypeMismatchException(HashTreeException, TypeError):
    """Raised when a leaf-only operation resolves to an inner node."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCodes.TYPE_MISMATCH,
            details=full_details,
        )


class BodyParseException(HashTreeException, ValueError):
    """Raised when a textual body description cannot be parsed."""

    def __init__(
        self,
        message: str,
        text: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if text is not None:
            full_details["text"] = text
        super().__init__(
            message=message,
            code=ErrorCodes.BODY_PARSE_ERROR,
            details=full_details,
        )


class CanonicalizationException(HashTreeException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )
