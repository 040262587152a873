"""
Module 03 - Growable Merkle Tree
A mutable perfect Merkle tree sized from a target leaf capacity.

Typical verification flow:
    tree = GrowableTree(4)
    tree.set_digest(0, trusted_root)      # pin the trusted anchor
    tree.set_value(0, body)               # fill in received data
    tree.set_digest(2, sibling_digest)
    if not tree.get_missing():
        ok = tree.is_consistent()
"""
from __future__ import annotations

import logging
from typing import Any

from core.crypto.schemes import DigestScheme
from core.merkle.engine import HashTree
from core.merkle.nodes import Digest, InnerNode, LeafNode, NodeArena
from core.schemas.errors import TypeMismatchException


logger = logging.getLogger(__name__)


def height_for_capacity(leaves_needed: int) -> int:
    """
    Height of the smallest perfect tree with at least ``leaves_needed`` leaves.

    The minimum height is 1, so capacities 0, 1 and 2 all give height 1.

    Example:
        >>> [height_for_capacity(n) for n in (1, 2, 3, 4, 5, 8, 9)]
        [1, 1, 2, 2, 3, 3, 4]
    """
    if leaves_needed <= 2:
        return 1
    return (leaves_needed - 1).bit_length()


class GrowableTree(HashTree):
    """
    A mutable Merkle tree.

    Every value and digest can be changed by index; changes propagate
    toward the root. A root digest set while the root has no parent is a
    pinned anchor and is never recomputed or cleared by propagation.
    """

    def __init__(
        self,
        leaves_needed: int,
        scheme: DigestScheme | None = None,
        *,
        _root: tuple[NodeArena, int] | None = None,
    ) -> None:
        height = height_for_capacity(leaves_needed)
        if _root is None:
            arena = NodeArena(scheme)
            root_id = arena.build_perfect(height)
        else:
            # adopt an already linked perfect tree of this height
            arena, root_id = _root
        super().__init__(arena, root_id, height)

    @classmethod
    def grown_from(cls, tree: "GrowableTree") -> "GrowableTree":
        """
        Return a tree one level higher whose left subtree is ``tree``.

        The new root and an empty right subtree are allocated in the same
        arena; the old root is relinked as the left child, so its digests
        stay valid and no node is copied. ``tree`` must not be used
        afterwards.
        """
        arena = tree._arena
        root_id = arena.new_inner()
        right_id = arena.build_perfect(tree.height, root_id)
        arena.link(root_id, tree._root_id, right_id)

        grown = cls(2 * tree.capacity, _root=(arena, root_id))
        logger.debug("Grew tree from height %d to %d", tree.height, grown.height)
        return grown

    def set_digest(self, bfs_index: int, digest: Digest) -> None:
        """
        Change the digest at a BFS index and propagate.

        Raises:
            IndexOutOfRangeException: If the index is out of range
            ValueConflictException: If the node is a leaf holding a value
        """
        node_id = self._locate_id(bfs_index)
        self._arena.set_digest(node_id, digest)

    def set_value(self, leaf_index: int, value: Any) -> None:
        """
        Change the value of a leaf (counted left to right) and propagate.

        Raises:
            IndexOutOfRangeException: If the leaf index is out of range
        """
        bfs_index = self.leaf_to_bfs(leaf_index)
        node_id = self._locate_id(bfs_index)
        if not isinstance(self._arena[node_id], LeafNode):
            raise TypeMismatchException(
                f"Node at index {bfs_index} is not a leaf",
                index=bfs_index,
            )
        self._arena.set_leaf_value(node_id, value)

    def clear(self) -> None:
        """
        Delete every leaf value, invalidating derived digests.

        A pinned root digest survives; reset it with set_digest(0, None).
        """
        stack = [self._root_id]
        while stack:
            node_id = stack.pop()
            node = self._arena[node_id]
            if isinstance(node, InnerNode):
                stack.append(node.right)
                stack.append(node.left)
            else:
                self._arena.set_leaf_value(node_id, None)
        logger.debug("Cleared tree of height %d", self._height)


__all__ = ["GrowableTree", "height_for_capacity"]
