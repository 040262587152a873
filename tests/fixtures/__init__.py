"""
Test fixtures package for hash tree tests.

This package provides factory functions for creating test objects.

Usage:
    from fixtures import make_filled_tree, naive_bfs_nodes

    def test_something():
        tree = make_filled_tree(["a", "b", "c", "d"])
        assert tree.locate(3) is naive_bfs_nodes(tree)[3]
"""

from .common import (
    make_builder,
    make_cuboid,
    make_cylinder,
    make_filled_tree,
    naive_bfs_nodes,
)

__all__ = [
    "make_builder",
    "make_cuboid",
    "make_cylinder",
    "make_filled_tree",
    "naive_bfs_nodes",
]
