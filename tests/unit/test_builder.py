"""
Incremental Builder Unit Tests
Tests for core/merkle/builder.py

Covers:
1. push() fills leaves left to right
2. Growth when the tree is full
3. build() snapshots are deterministic and independent
4. clear()
"""
import pytest

from core.crypto.schemes import SHA256_SCHEME
from core.merkle import FrozenTree, IncrementalBuilder

from fixtures import make_builder, make_cuboid, make_cylinder


class TestPush:
    """Tests for IncrementalBuilder.push()."""

    def test_push_fills_from_the_left(self):
        """Values land on consecutive leaves."""
        builder = make_builder(["a", "b"], leaves_needed=4)
        assert builder.tree.values() == ["a", "b", None, None]
        assert builder.values == ("a", "b")
        assert len(builder) == 2

    def test_push_returns_builder(self):
        """push() can be chained."""
        builder = IncrementalBuilder(2)
        assert builder.push("a").push("b") is builder

    def test_push_none_rejected(self):
        """None is not a value."""
        builder = IncrementalBuilder(2)
        with pytest.raises(ValueError):
            builder.push(None)
        assert len(builder) == 0

    def test_full_tree_derives_root(self):
        """Filling every leaf derives the root digest."""
        builder = make_builder(["a", "b"])
        assert builder.tree.root_digest == 9506

    def test_bodies_as_values(self, cuboid, cylinder):
        """Bodies are hashed through their textual form."""
        builder = make_builder([cuboid, cylinder])
        assert builder.tree.digest_at(1) == builder.scheme.leaf_digest("Cuboid(1,2,3)")
        assert builder.tree.value_at(1) == make_cylinder()


class TestGrowth:
    """Tests for growth past the initial capacity."""

    def test_third_value_grows_capacity_two(self):
        """Pushing a third value adds one level."""
        builder = make_builder(["a", "b"])
        assert builder.height == 1
        builder.push("c")
        assert builder.height == 2
        assert builder.capacity == 4

    def test_earlier_leaves_stay_in_left_subtree(self):
        """The old tree becomes the left child of the new root."""
        builder = make_builder(["a", "b", "c"])
        assert builder.tree.values() == ["a", "b", "c", None]
        assert builder.tree.digest_at(1) == 9506
        assert builder.tree.root_digest is None

    def test_grows_repeatedly(self):
        """Nine values need a tree of height 4."""
        builder = make_builder(list("abcdefghi"))
        assert builder.height == 4
        assert builder.tree.values()[:9] == list("abcdefghi")

    def test_no_growth_below_capacity(self):
        """A builder sized for its values never grows."""
        builder = make_builder(list("abcde"), leaves_needed=5)
        assert builder.height == 3


class TestBuild:
    """Tests for IncrementalBuilder.build()."""

    def test_build_returns_frozen_tree(self):
        snapshot = make_builder(["a", "b"]).build()
        assert isinstance(snapshot, FrozenTree)
        assert snapshot.root_digest == 9506
        assert snapshot.values() == ["a", "b"]

    def test_build_twice_is_identical(self):
        """Two snapshots without an intervening push are equal."""
        builder = make_builder(["a", "b", "c"])
        first, second = builder.build(), builder.build()
        assert str(first) == str(second)
        assert first.root_digest == second.root_digest
        assert first.values() == second.values()

    def test_snapshot_is_independent(self):
        """Later pushes do not change an earlier snapshot."""
        builder = make_builder(["a", "b", "c"])
        snapshot = builder.build()
        builder.push("d")
        assert snapshot.values() == ["a", "b", "c", None]
        assert builder.tree.root_digest == 94109400
        assert snapshot.root_digest is None

    def test_snapshot_uses_builder_scheme(self):
        """The digest scheme is shared with snapshots."""
        builder = make_builder([make_cuboid(), make_cylinder()], scheme=SHA256_SCHEME)
        snapshot = builder.build()
        assert snapshot.scheme is SHA256_SCHEME
        assert snapshot.root_digest == builder.tree.root_digest


class TestClear:
    """Tests for IncrementalBuilder.clear()."""

    def test_clear_forgets_values(self):
        builder = make_builder(["a", "b", "c"])
        builder.clear()
        assert len(builder) == 0
        assert builder.tree.values() == [None] * 4
        assert builder.tree.root_digest is None

    def test_clear_keeps_height(self):
        """Clearing does not shrink a grown tree."""
        builder = make_builder(["a", "b", "c"])
        builder.clear()
        assert builder.height == 2

    def test_push_after_clear_starts_at_leaf_zero(self):
        builder = make_builder(["a", "b"])
        builder.clear()
        builder.push("z")
        assert builder.tree.values() == ["z", None]
