"""
Pytest configuration and shared fixtures for hash tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_cuboid = _common.make_cuboid
make_cylinder = _common.make_cylinder
make_filled_tree = _common.make_filled_tree
make_builder = _common.make_builder
naive_bfs_nodes = _common.naive_bfs_nodes


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def clean_hashtree_env(monkeypatch):
    """Remove HASHTREE_* variables so a developer's environment cannot leak in."""
    for name in list(os.environ):
        if name.startswith("HASHTREE_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cuboid():
    """Provide a default Cuboid(1,2,3)."""
    return make_cuboid()


@pytest.fixture
def cylinder():
    """Provide a default Cylinder(4,5)."""
    return make_cylinder()


@pytest.fixture
def empty_tree():
    """Provide an empty GrowableTree of height 2 (four leaves)."""
    return make_filled_tree([], capacity=4)


@pytest.fixture
def full_tree():
    """Provide a GrowableTree of height 2 with all four leaves set."""
    return make_filled_tree(["a", "b", "c", "d"])


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
