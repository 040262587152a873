"""
Common test fixtures shared by all modules.

Provides factory functions for the core data structures:
- Cuboid / Cylinder bodies
- GrowableTree filled with values
- IncrementalBuilder with pushed values

Plus a naive breadth-first materialization used as a reference for the
logarithmic index search.
"""

from collections import deque
from typing import Any, Optional, Sequence

from core.crypto.schemes import DigestScheme
from core.merkle import GrowableTree, HashTree, IncrementalBuilder, InnerNode, Node
from core.schemas.bodies import Cuboid, Cylinder


def make_cuboid(length: int = 1, width: int = 2, height: int = 3) -> Cuboid:
    """Create a Cuboid with test defaults."""
    return Cuboid(length=length, width=width, height=height)


def make_cylinder(radius: int = 4, height: int = 5) -> Cylinder:
    """Create a Cylinder with test defaults."""
    return Cylinder(radius=radius, height=height)


def make_filled_tree(
    values: Sequence[Any],
    capacity: Optional[int] = None,
    scheme: Optional[DigestScheme] = None,
) -> GrowableTree:
    """Create a GrowableTree and set ``values`` on its leftmost leaves."""
    tree = GrowableTree(capacity if capacity is not None else len(values), scheme)
    for index, value in enumerate(values):
        tree.set_value(index, value)
    return tree


def make_builder(
    values: Sequence[Any],
    leaves_needed: int = 2,
    scheme: Optional[DigestScheme] = None,
) -> IncrementalBuilder:
    """Create an IncrementalBuilder and push ``values``."""
    builder = IncrementalBuilder(leaves_needed, scheme)
    for value in values:
        builder.push(value)
    return builder


def naive_bfs_nodes(tree: HashTree) -> list[Node]:
    """Materialize every node of ``tree`` in breadth-first order (O(n))."""
    arena = tree.arena
    ordered: list[Node] = []
    queue = deque([tree.root_id])
    while queue:
        node = arena[queue.popleft()]
        ordered.append(node)
        if isinstance(node, InnerNode):
            queue.append(node.left)
            queue.append(node.right)
    return ordered
