"""
Module 03 - Merkle Hash Trees
Perfect binary hash trees addressed by breadth-first index.

This module provides:
- GrowableTree: mutable tree for verifying received data against a
  trusted root digest
- FrozenTree: immutable snapshot reconstructed from height, root digest
  and leaf values
- IncrementalBuilder: grows a tree value by value and freezes snapshots
- HashTree: shared search / consistency / frontier logic

Usage:
    from core.merkle import GrowableTree, IncrementalBuilder

    builder = IncrementalBuilder(4)
    for body in bodies:
        builder.push(body)
    snapshot = builder.build()

    tree = GrowableTree(4)
    tree.set_digest(0, snapshot.root_digest)
    tree.set_value(0, bodies[0])
    tree.get_missing()      # indices still required
"""
from .nodes import (
    Digest,
    InnerNode,
    LeafNode,
    Node,
    NodeArena,
)
from .engine import (
    HashTree,
    ancestor_path,
    last_bfs_index,
    last_inner_index,
)
from .growable import GrowableTree, height_for_capacity
from .frozen import FrozenTree
from .builder import IncrementalBuilder
from .render import PLACEHOLDER, render_node


__all__ = [
    # Nodes
    "Digest",
    "InnerNode",
    "LeafNode",
    "Node",
    "NodeArena",
    # Engine
    "HashTree",
    "ancestor_path",
    "last_bfs_index",
    "last_inner_index",
    # Trees
    "GrowableTree",
    "height_for_capacity",
    "FrozenTree",
    "IncrementalBuilder",
    # Rendering
    "PLACEHOLDER",
    "render_node",
]
