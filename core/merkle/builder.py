"""
Module 03 - Incremental Merkle Tree Builder
Grows a Merkle tree one value at a time and freezes it into snapshots.

Growth Rule:
When every leaf is occupied, the next push adds one level at the top:
a new root is created, the current root becomes its left child and an
empty subtree of the same height becomes its right child. Existing
leaves keep their left-to-right position.

Usage:
    builder = IncrementalBuilder(2)
    builder.push(Cuboid(length=1, width=2, height=3)).push(Cylinder(radius=4, height=5))
    snapshot = builder.build()   # FrozenTree
"""
from __future__ import annotations

import logging
from typing import Any

from core.crypto.schemes import DigestScheme
from core.merkle.frozen import FrozenTree
from core.merkle.growable import GrowableTree


logger = logging.getLogger(__name__)


class IncrementalBuilder:
    """
    Used to construct a Merkle tree value by value.

    Args:
        leaves_needed: Expected final number of leaves; the builder still
            grows past it on demand
        scheme: Digest scheme shared by the live tree and every snapshot
    """

    def __init__(self, leaves_needed: int, scheme: DigestScheme | None = None) -> None:
        self._tree = GrowableTree(leaves_needed, scheme)
        self._values: list[Any] = []

    @property
    def height(self) -> int:
        return self._tree.height

    @property
    def capacity(self) -> int:
        return self._tree.capacity

    @property
    def scheme(self) -> DigestScheme:
        return self._tree.scheme

    @property
    def values(self) -> tuple[Any, ...]:
        """The pushed values in insertion order."""
        return tuple(self._values)

    @property
    def tree(self) -> GrowableTree:
        """The live tree. Mutating it directly bypasses the value record."""
        return self._tree

    def __len__(self) -> int:
        return len(self._values)

    def push(self, value: Any) -> "IncrementalBuilder":
        """
        Insert a value at the next free leaf, growing the tree if it is full.

        Returns:
            This builder, for chaining
        """
        if value is None:
            raise ValueError("Cannot push None; leaves without a value are implicit")
        leaf_index = len(self._values)
        if leaf_index == self._tree.capacity:
            self._tree = GrowableTree.grown_from(self._tree)
        self._tree.set_value(leaf_index, value)
        self._values.append(value)
        return self

    def build(self) -> FrozenTree:
        """
        Freeze the current state.

        The snapshot is independent of the builder: later pushes or clears
        do not affect it.
        """
        return FrozenTree(
            self._tree.height,
            self._tree.root_digest,
            self._values,
            scheme=self._tree.scheme,
        )

    def clear(self) -> None:
        """Delete all values, reset the root digest and forget the pushed values."""
        self._tree.clear()
        self._tree.set_digest(0, None)
        self._values.clear()
        logger.debug("Builder cleared at height %d", self._tree.height)


__all__ = ["IncrementalBuilder"]
