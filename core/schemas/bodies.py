"""
Module 01 - Schemas & Canonicalization
File: bodies.py

Purpose: Reference leaf payloads - simple 3D body descriptors.

A payload only needs a stable textual form and value equality; the
reference digest scheme hashes ``str(body)``, so the textual form below
is part of the digest contract:

    Cuboid(length,width,height)
    Cylinder(radius,height)
"""

import re
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import BodyParseException


class Cuboid(BaseModel):
    """A 3D object representing a cuboid."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    length: int = Field(..., ge=0, description="Non-negative length")
    width: int = Field(..., ge=0, description="Non-negative width")
    height: int = Field(..., ge=0, description="Non-negative height")

    def __str__(self) -> str:
        return f"Cuboid({self.length},{self.width},{self.height})"


class Cylinder(BaseModel):
    """A 3D object representing a cylinder."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    radius: int = Field(..., ge=0, description="Non-negative radius")
    height: int = Field(..., ge=0, description="Non-negative height")

    def __str__(self) -> str:
        return f"Cylinder({self.radius},{self.height})"


Body = Union[Cuboid, Cylinder]

# type name -> (model, field names in textual order)
BODY_TYPES: dict[str, tuple[type[BaseModel], tuple[str, ...]]] = {
    "Cuboid": (Cuboid, ("length", "width", "height")),
    "Cylinder": (Cylinder, ("radius", "height")),
}

_BODY_SEPARATORS = re.compile(r"[() ,]")
_DECIMAL = re.compile(r"[+-]?[0-9]+")

INT32_MAX = 2 ** 31 - 1


def parse_integer(text: str) -> int:
    """
    Parse a plain decimal integer: an optional sign followed by ASCII digits.

    Unlike int(), underscores, surrounding whitespace and non-ASCII digits
    are rejected.

    Raises:
        ValueError: If ``text`` is not a plain decimal integer
    """
    if not _DECIMAL.fullmatch(text):
        raise ValueError(f"Not a decimal integer: {text!r}")
    return int(text)


def _split_body(text: str) -> list[str]:
    tokens = _BODY_SEPARATORS.split(text)
    # trailing separators such as the closing parenthesis leave empty tokens
    while tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


def parse_body(text: str) -> Body:
    """
    Parse the textual form of a body.

    Args:
        text: e.g. ``"Cuboid(1,2,3)"`` or ``"Cylinder(4,5)"``

    Returns:
        The parsed body model.

    Raises:
        BodyParseException: If the type is unknown, the parameter count is
            wrong, or a parameter is not a non-negative 32-bit integer.
    """
    tokens = _split_body(text)
    if not tokens or tokens[0] not in BODY_TYPES:
        raise BodyParseException(
            "Inserting this type of object is not allowed.",
            text=text,
        )

    model, field_names = BODY_TYPES[tokens[0]]
    params = tokens[1:]
    if len(params) != len(field_names):
        raise BodyParseException(
            f"Invalid input, wrong parameters: {text}.",
            text=text,
            details={"expected": len(field_names), "actual": len(params)},
        )

    values: list[int] = []
    for param in params:
        try:
            number = parse_integer(param)
        except ValueError:
            raise BodyParseException(
                f"Invalid input, wrong parameters: {text}.",
                text=text,
                details={"parameter": param},
            ) from None
        if number < 0 or number > INT32_MAX:
            raise BodyParseException(
                f"Invalid input, wrong parameters: {text}.",
                text=text,
                details={"parameter": param},
            )
        values.append(number)

    return model(**dict(zip(field_names, values)))
