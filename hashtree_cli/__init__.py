"""
Hash Tree CLI

Command-line interface for building and verifying Merkle hash trees.

Usage:
    python -m hashtree_cli shell
    python -m hashtree_cli build 4 "Cuboid(1,2,3)" "Cylinder(4,5)"
    python -m hashtree_cli check 4 <root-digest> --value "0=Cuboid(1,2,3)" --digest 2=17
    python -m hashtree_cli config --init
"""

__version__ = "0.1.0"
