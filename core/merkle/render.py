"""
Module 03 - Debug Rendering
Textual representation of a (sub)tree.

Grammar:
- inner node: "(" digest-or-"*" " " left " " right ")"
- leaf with a value: ("value")
- leaf with only a digest: the bare digest
- empty leaf: (*)

Example (height 1, only the left value known):
    (* ("Cuboid(1,2,3)") (*))
"""
from __future__ import annotations

from core.merkle.nodes import InnerNode, NodeArena

PLACEHOLDER = "*"


def render_node(arena: NodeArena, node_id: int) -> str:
    """Render the subtree below ``node_id``."""
    node = arena[node_id]
    if isinstance(node, InnerNode):
        label = str(node.digest) if node.has_digest() else PLACEHOLDER
        left = render_node(arena, node.left)
        right = render_node(arena, node.right)
        return f"({label} {left} {right})"
    if node.has_value():
        return f'("{node.value}")'
    if node.has_digest():
        return str(node.digest)
    return f"({PLACEHOLDER})"


__all__ = ["PLACEHOLDER", "render_node"]
