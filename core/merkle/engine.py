"""
Module 03 - Hash Tree Engine
Shared logic for every perfect Merkle tree, independent of how it was built.

This module provides:
- HashTree: abstract base with indexed search, consistency checking and
  frontier ("missing nodes") computation
- ancestor_path: the index arithmetic behind the search

Addressing:
- BFS index: root = 0, children of i are 2i + 1 (left) and 2i + 2 (right)
- Leaf index: leaves counted left to right from 0; leaf p of a tree of
  height H sits at BFS index 2^H + p - 1

Search:
The tree is never materialized as a flat array. A node is found by
computing its chain of ancestors purely from the index and walking that
chain down from the root, so every lookup is O(log n) in time and space.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from core.crypto.schemes import DigestScheme
from core.merkle.nodes import Digest, InnerNode, LeafNode, Node, NodeArena
from core.merkle.render import render_node
from core.schemas.errors import IndexOutOfRangeException


logger = logging.getLogger(__name__)


def ancestor_path(index: int) -> list[int]:
    """
    Return the BFS indices from ``index`` up to, but excluding, the root.

    Uses parent(i) = (i - 1) // 2. This is pure arithmetic and does not
    look at any tree, so callers must range-check ``index`` first.

    Example:
        >>> ancestor_path(9)
        [9, 4, 1]
    """
    path: list[int] = []
    while index > 0:
        path.append(index)
        index = (index - 1) // 2
    return path


def last_bfs_index(height: int) -> int:
    """Highest BFS index of a perfect tree of the given height."""
    return 2 ** (height + 1) - 2


def last_inner_index(height: int) -> int:
    """Highest BFS index of an inner node of a perfect tree of the given height."""
    return 2 ** height - 2


class HashTree(ABC):
    """
    Skeletal implementation shared by all perfect Merkle trees.

    Subclasses decide whether the tree may be mutated by implementing
    set_digest, set_value and clear.
    """

    def __init__(self, arena: NodeArena, root_id: int, height: int) -> None:
        self._arena = arena
        self._root_id = root_id
        self._height = height

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    @property
    def height(self) -> int:
        """Number of edges from the root to any leaf."""
        return self._height

    @property
    def capacity(self) -> int:
        """Number of leaves."""
        return 2 ** self._height

    @property
    def scheme(self) -> DigestScheme:
        return self._arena.scheme

    @property
    def arena(self) -> NodeArena:
        return self._arena

    @property
    def root_id(self) -> int:
        return self._root_id

    @property
    def root(self) -> InnerNode:
        return self._arena.inner(self._root_id)

    @property
    def root_digest(self) -> Digest:
        return self.root.digest

    def leaf_to_bfs(self, leaf_index: int) -> int:
        """
        Map a left-to-right leaf index to its BFS index.

        Raises:
            IndexOutOfRangeException: If the leaf index is outside the tree
        """
        if leaf_index < 0 or leaf_index >= self.capacity:
            raise IndexOutOfRangeException(
                f"Leaf index {leaf_index} out of range for {self.capacity} leaves",
                index=leaf_index,
                limit=self.capacity - 1,
            )
        return 2 ** self._height + leaf_index - 1

    # -------------------------------------------------------------------------
    # Indexed search
    # -------------------------------------------------------------------------

    def _locate_id(self, bfs_index: int) -> int:
        highest = last_bfs_index(self._height)
        if bfs_index < 0 or bfs_index > highest:
            raise IndexOutOfRangeException(
                f"Index {bfs_index} out of range for a tree of height {self._height}",
                index=bfs_index,
                limit=highest,
            )
        current = self._root_id
        for index in reversed(ancestor_path(bfs_index)):
            # every node above the target is an inner node
            parent = self._arena.inner(current)
            if index % 2 == 0:
                # right children always have an even index
                current = parent.right
            else:
                current = parent.left
        return current

    def locate(self, bfs_index: int) -> Node:
        """
        Return the node at a BFS index.

        Raises:
            IndexOutOfRangeException: If bfs_index > 2^(H+1) - 2 or negative
        """
        return self._arena[self._locate_id(bfs_index)]

    def digest_at(self, bfs_index: int) -> Digest:
        return self.locate(bfs_index).digest

    def value_at(self, leaf_index: int) -> Any:
        node = self.locate(self.leaf_to_bfs(leaf_index))
        return node.value if isinstance(node, LeafNode) else None

    def values(self) -> list[Any]:
        """Leaf values (None where unknown) from left to right."""
        result: list[Any] = []
        stack = [self._root_id]
        while stack:
            node = self._arena[stack.pop()]
            if isinstance(node, InnerNode):
                stack.append(node.right)
                stack.append(node.left)
            else:
                result.append(node.value)
        return result

    # -------------------------------------------------------------------------
    # Consistency & frontier
    # -------------------------------------------------------------------------

    def is_consistent(self) -> bool:
        """
        Check the root digest against the digests of its two children.

        Only meaningful once get_missing() is empty. Returns False when the
        root or either child has no digest. With a commutative scheme both
        child orders are accepted.
        """
        root = self.root
        left = self._arena[root.left]
        right = self._arena[root.right]
        if not (root.has_digest() and left.has_digest() and right.has_digest()):
            return False

        combine = self.scheme.combine
        if root.digest == combine(left.digest, right.digest):
            return True
        if self.scheme.commutative and root.digest == combine(right.digest, left.digest):
            return True
        logger.info(
            "Root digest %s does not match children (%s, %s)",
            root.digest, left.digest, right.digest,
        )
        return False

    def get_missing(self) -> list[int]:
        """
        Determine which nodes are still needed to derive the root digest.

        Returns:
            Ascending BFS indices. Inner indices ask for a digest, leaf
            indices for a value (or a digest). An entirely unknown tree
            asks for every leaf.
        """
        missing = self._indices_without_digest()
        self._filter_unnecessary(missing)
        return sorted(missing)

    def _indices_without_digest(self) -> set[int]:
        # the root is always collected
        missing: set[int] = {0}
        stack: list[tuple[int, int]] = [(self._root_id, 0)]
        while stack:
            node_id, index = stack.pop()
            node = self._arena[node_id]
            if not node.has_digest():
                missing.add(index)
            if isinstance(node, InnerNode):
                stack.append((node.left, 2 * index + 1))
                stack.append((node.right, 2 * index + 2))
        return missing

    def _filter_unnecessary(self, missing: set[int]) -> set[int]:
        last_inner = last_inner_index(self._height)
        for index in range(last_inner, -1, -1):
            left_index = 2 * index + 1
            right_index = 2 * index + 2

            if index not in missing:
                # known node: its whole subtree is unnecessary
                missing.discard(left_index)
                missing.discard(right_index)
            elif left_index in missing and right_index in missing:
                # both children unknown: the node alone covers them
                missing.discard(left_index)
                missing.discard(right_index)
            else:
                # one child is known, so the node itself is derivable once
                # the other child is supplied
                missing.discard(index)

        if 0 in missing:
            # nothing known at all: ask for every value rather than the root
            missing.discard(0)
            missing.update(range(last_inner + 1, last_bfs_index(self._height) + 1))
        return missing

    # -------------------------------------------------------------------------
    # Mutation (subclass policy)
    # -------------------------------------------------------------------------

    @abstractmethod
    def set_digest(self, bfs_index: int, digest: Digest) -> None:
        """Change the digest of the node at a BFS index."""

    @abstractmethod
    def set_value(self, leaf_index: int, value: Any) -> None:
        """Change the value of the leaf at a left-to-right leaf index."""

    @abstractmethod
    def clear(self) -> None:
        """Delete all leaf values."""

    def __str__(self) -> str:
        return render_node(self._arena, self._root_id)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(height={self._height}, "
            f"root_digest={self.root_digest})"
        )


__all__ = [
    "HashTree",
    "ancestor_path",
    "last_bfs_index",
    "last_inner_index",
]
