"""
Module 03 - Frozen Merkle Tree
An immutable perfect Merkle tree reconstructed from a height, an optional
root digest and the ordered leaf values.

Reconstruction order matters: the root digest is seeded first, so a
present root digest is a pinned anchor before any leaf value propagates.
After construction every mutating call raises and leaves the tree as is.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from core.crypto.schemes import DigestScheme
from core.merkle.engine import HashTree
from core.merkle.nodes import Digest, InnerNode, NodeArena
from core.schemas.errors import UnsupportedOperationException


logger = logging.getLogger(__name__)


class FrozenTree(HashTree):
    """
    An unmodifiable Merkle tree.

    Args:
        height: Height of the tree (at least 1)
        root_digest: Root digest, or None if unknown
        values: Leaf values, consumed left to right; leaves beyond the end
            of ``values`` stay empty
        scheme: Digest scheme (defaults to the reference scheme)
    """

    def __init__(
        self,
        height: int,
        root_digest: Digest,
        values: Iterable[Any],
        scheme: DigestScheme | None = None,
    ) -> None:
        if height < 1:
            raise ValueError(f"Tree height must be at least 1, got {height}")
        arena = NodeArena(scheme)
        root_id = arena.build_perfect(height)
        arena.set_digest(root_id, root_digest)
        super().__init__(arena, root_id, height)
        self._seed_values(list(values))

    def _seed_values(self, values: list[Any]) -> None:
        if len(values) > self.capacity:
            raise ValueError(
                f"{len(values)} values do not fit into {self.capacity} leaves"
            )
        pending = iter(values)
        stack = [self._root_id]
        while stack:
            node_id = stack.pop()
            node = self._arena[node_id]
            if isinstance(node, InnerNode):
                stack.append(node.right)
                stack.append(node.left)
                continue
            value = next(pending, None)
            if value is not None:
                self._arena.set_leaf_value(node_id, value)

    def _reject(self, operation: str) -> UnsupportedOperationException:
        logger.debug("Rejected %s on a frozen tree", operation)
        return UnsupportedOperationException(
            f"{operation} is not supported on a frozen tree",
            operation=operation,
        )

    def set_digest(self, bfs_index: int, digest: Digest) -> None:
        """Always raises UnsupportedOperationException."""
        raise self._reject("set_digest")

    def set_value(self, leaf_index: int, value: Any) -> None:
        """Always raises UnsupportedOperationException."""
        raise self._reject("set_value")

    def clear(self) -> None:
        """Always raises UnsupportedOperationException."""
        raise self._reject("clear")


__all__ = ["FrozenTree"]
