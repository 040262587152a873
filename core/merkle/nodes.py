"""
Module 03 - Merkle Nodes and Digest Propagation
Node variants, the arena that owns them, and the upward propagation rule.

This module provides:
- InnerNode / LeafNode: the two node shapes (tagged union ``Node``)
- NodeArena: flat node storage addressed by stable integer ids
- Leaf value / node digest setters that propagate toward the root

Ownership Rules:
- Every node lives in exactly one arena and is addressed by its id
- Parent and child links are ids, never object references
- Ids are stable: re-rooting a tree only rewrites links, nodes are
  never copied or moved

Propagation Rule (applied to each inner node on the way up):
1. A parentless node whose digest was set explicitly is a pinned anchor:
   propagation stops without touching it. A root digest derived from its
   children is not pinned and is invalidated like any other.
2. If both children hold digests: digest = combine(left, right).
3. Otherwise the digest becomes absent.
Propagation then continues with the parent until the root is passed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from core.crypto.schemes import DEFAULT_SCHEME, DigestScheme
from core.schemas.errors import TypeMismatchException, ValueConflictException


Digest = Optional[int]


@dataclass
class InnerNode:
    """
    An inner node with exactly two children.

    Attributes:
        parent: Id of the parent inner node (None only for a root)
        left: Id of the left child
        right: Id of the right child
        digest: combine(left, right) when derived, or a pinned digest
        pinned: True while the digest was supplied through set_digest
    """
    parent: Optional[int] = None
    left: Optional[int] = None
    right: Optional[int] = None
    digest: Digest = None
    pinned: bool = False

    def has_digest(self) -> bool:
        return self.digest is not None


@dataclass
class LeafNode:
    """
    A leaf holding an optional payload.

    Attributes:
        parent: Id of the parent inner node (always set once linked)
        value: The payload, or None if unknown
        digest: leaf_digest(value) while a value is present, otherwise an
            externally supplied digest or None
    """
    parent: Optional[int] = None
    value: Any = None
    digest: Digest = None

    def has_digest(self) -> bool:
        return self.digest is not None

    def has_value(self) -> bool:
        return self.value is not None


Node = Union[InnerNode, LeafNode]


class NodeArena:
    """
    Flat storage for the nodes of one tree.

    The arena owns every node; trees hold only the id of their root.
    Growing a tree allocates the new root and its fresh subtree in the
    same arena and relinks the old root, so no node is ever copied.
    """

    def __init__(self, scheme: DigestScheme | None = None) -> None:
        self.scheme = scheme or DEFAULT_SCHEME
        self._nodes: list[Node] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, node_id: int) -> Node:
        return self._nodes[node_id]

    def add(self, node: Node) -> int:
        """Store a node and return its id."""
        self._nodes.append(node)
        return len(self._nodes) - 1

    def new_inner(self, parent: int | None = None, digest: Digest = None) -> int:
        return self.add(InnerNode(parent=parent, digest=digest))

    def new_leaf(self, parent: int) -> int:
        return self.add(LeafNode(parent=parent))

    def inner(self, node_id: int) -> InnerNode:
        """
        Return the inner node stored under ``node_id``.

        Raises:
            TypeMismatchException: If the node is a leaf
        """
        node = self._nodes[node_id]
        if not isinstance(node, InnerNode):
            raise TypeMismatchException(
                f"Node {node_id} is not an inner node",
                details={"node_id": node_id},
            )
        return node

    def link(self, parent_id: int, left_id: int, right_id: int) -> None:
        """Attach two children to an inner node and point them back at it."""
        parent = self.inner(parent_id)
        parent.left = left_id
        parent.right = right_id
        self._nodes[left_id].parent = parent_id
        self._nodes[right_id].parent = parent_id

    def build_perfect(self, height: int, parent: int | None = None) -> int:
        """
        Allocate an empty perfect subtree and return the id of its top node.

        A subtree of height 0 is a single leaf; a subtree of height h > 0
        is an inner node with two subtrees of height h - 1.
        """
        if height == 0:
            if parent is None:
                raise ValueError("A leaf always has a parent; height must be at least 1")
            return self.new_leaf(parent)
        node_id = self.new_inner(parent)
        left_id = self.build_perfect(height - 1, node_id)
        right_id = self.build_perfect(height - 1, node_id)
        self.link(node_id, left_id, right_id)
        return node_id

    # -------------------------------------------------------------------------
    # Mutation + propagation
    # -------------------------------------------------------------------------

    def set_leaf_value(self, leaf_id: int, value: Any) -> None:
        """
        Store a payload on a leaf, re-derive its digest and propagate.

        Passing None clears the value and the digest.

        Raises:
            TypeMismatchException: If the node is an inner node
        """
        leaf = self._nodes[leaf_id]
        if not isinstance(leaf, LeafNode):
            raise TypeMismatchException(
                f"Node {leaf_id} is not a leaf",
                details={"node_id": leaf_id},
            )
        leaf.value = value
        leaf.digest = self.scheme.leaf_digest(value) if value is not None else None
        self.propagate(leaf.parent)

    def set_digest(self, node_id: int, digest: Digest) -> None:
        """
        Store a digest directly on a node and propagate to its parent.

        Raises:
            ValueConflictException: If the node is a leaf holding a value
        """
        node = self._nodes[node_id]
        if isinstance(node, LeafNode) and node.has_value():
            raise ValueConflictException(
                "This node has a value, thus the hash cannot be changed.",
            )
        node.digest = digest
        if isinstance(node, InnerNode):
            node.pinned = digest is not None
        if node.parent is not None:
            self.propagate(node.parent)

    def propagate(self, node_id: int | None) -> None:
        """Recompute or invalidate inner digests from ``node_id`` up to the root."""
        current = node_id
        while current is not None:
            node = self.inner(current)
            if node.parent is None and node.pinned:
                return
            left = self._nodes[node.left]
            right = self._nodes[node.right]
            if left.has_digest() and right.has_digest():
                node.digest = self.scheme.combine(left.digest, right.digest)
            else:
                node.digest = None
            node.pinned = False
            current = node.parent


__all__ = [
    "Digest",
    "InnerNode",
    "LeafNode",
    "Node",
    "NodeArena",
]
