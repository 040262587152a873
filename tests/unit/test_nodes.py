"""
Merkle Node Unit Tests
Tests for core/merkle/nodes.py

Covers:
1. Arena allocation and perfect subtree shape
2. Leaf value setter (digest derivation and clearing)
3. Digest setter (value conflict, propagation to the parent)
4. Propagation rule (recompute, invalidate, pinned anchor)
"""
import pytest

from core.crypto.schemes import REFERENCE_SCHEME, SHA256_SCHEME
from core.merkle.nodes import InnerNode, LeafNode, NodeArena
from core.schemas.errors import ErrorCodes, TypeMismatchException, ValueConflictException


def _perfect(height: int, scheme=None) -> tuple[NodeArena, int]:
    arena = NodeArena(scheme)
    return arena, arena.build_perfect(height)


class TestNodeShapes:
    """Tests for the two node variants."""

    def test_inner_node_defaults(self):
        """A new inner node has no links and no digest."""
        node = InnerNode()
        assert node.parent is None
        assert node.left is None and node.right is None
        assert not node.has_digest()

    def test_leaf_node_defaults(self):
        """A new leaf has neither value nor digest."""
        leaf = LeafNode(parent=0)
        assert not leaf.has_value()
        assert not leaf.has_digest()

    def test_zero_digest_counts_as_present(self):
        """Digest 0 is a real digest, not an absent one."""
        assert InnerNode(digest=0).has_digest()
        assert LeafNode(digest=0).has_digest()


class TestArena:
    """Tests for NodeArena allocation."""

    def test_default_scheme_is_reference(self):
        """An arena without an explicit scheme uses the reference scheme."""
        assert NodeArena().scheme is REFERENCE_SCHEME

    def test_explicit_scheme(self):
        """The scheme passed in is kept."""
        assert NodeArena(SHA256_SCHEME).scheme is SHA256_SCHEME

    @pytest.mark.parametrize("height", [1, 2, 3, 4])
    def test_build_perfect_node_count(self, height):
        """A perfect tree of height h has 2^(h+1) - 1 nodes."""
        arena, _ = _perfect(height)
        assert len(arena) == 2 ** (height + 1) - 1

    def test_build_perfect_links(self):
        """Children point back at their parent."""
        arena, root_id = _perfect(1)
        root = arena.inner(root_id)
        assert root.parent is None
        assert isinstance(arena[root.left], LeafNode)
        assert isinstance(arena[root.right], LeafNode)
        assert arena[root.left].parent == root_id
        assert arena[root.right].parent == root_id

    def test_leaves_are_all_at_same_depth(self):
        """Every leaf of a perfect tree is exactly `height` edges below the root."""
        arena, root_id = _perfect(3)
        depths = []
        stack = [(root_id, 0)]
        while stack:
            node_id, depth = stack.pop()
            node = arena[node_id]
            if isinstance(node, InnerNode):
                stack.append((node.left, depth + 1))
                stack.append((node.right, depth + 1))
            else:
                depths.append(depth)
        assert depths == [3] * 8

    def test_add_returns_sequential_ids(self):
        """Ids are positions in the arena."""
        arena = NodeArena()
        assert arena.add(InnerNode()) == 0
        assert arena.add(InnerNode()) == 1

    def test_inner_rejects_leaf_id(self):
        """Asking for an inner node under a leaf id raises a typed error."""
        arena, root_id = _perfect(1)
        left = arena.inner(root_id).left
        with pytest.raises(TypeMismatchException) as exc_info:
            arena.inner(left)
        assert exc_info.value.code == ErrorCodes.TYPE_MISMATCH
        assert exc_info.value.details == {"node_id": left}

    def test_parentless_leaf_rejected(self):
        """A perfect subtree of height 0 cannot be a root."""
        with pytest.raises(ValueError, match="height must be at least 1"):
            NodeArena().build_perfect(0)


class TestLeafValue:
    """Tests for set_leaf_value."""

    def test_value_sets_reference_digest(self):
        """The leaf digest is the reference hash of the textual value."""
        arena, root_id = _perfect(1)
        left = arena.inner(root_id).left
        arena.set_leaf_value(left, "a")
        assert arena[left].value == "a"
        assert arena[left].digest == 97

    def test_none_clears_value_and_digest(self):
        """Setting None removes the value and the digest."""
        arena, root_id = _perfect(1)
        left = arena.inner(root_id).left
        arena.set_leaf_value(left, "a")
        arena.set_leaf_value(left, None)
        assert not arena[left].has_value()
        assert not arena[left].has_digest()

    def test_both_leaves_derive_root(self):
        """Once both children are known the parent digest is their combination."""
        arena, root_id = _perfect(1)
        root = arena.inner(root_id)
        arena.set_leaf_value(root.left, "a")
        assert root.digest is None
        arena.set_leaf_value(root.right, "b")
        assert root.digest == 97 * 98

    def test_value_on_inner_node_rejected(self):
        """Values only go on leaves; the tree is left unchanged."""
        arena, root_id = _perfect(1)
        with pytest.raises(TypeMismatchException):
            arena.set_leaf_value(root_id, "a")
        assert arena.inner(root_id).digest is None

    def test_sha256_scheme_is_used(self):
        """Leaf digests come from the arena's scheme."""
        arena, root_id = _perfect(1, SHA256_SCHEME)
        left = arena.inner(root_id).left
        arena.set_leaf_value(left, "a")
        assert arena[left].digest == SHA256_SCHEME.leaf_digest("a")


class TestSetDigest:
    """Tests for set_digest."""

    def test_leaf_with_value_rejects_digest(self):
        """A leaf holding a value cannot take a digest."""
        arena, root_id = _perfect(1)
        left = arena.inner(root_id).left
        arena.set_leaf_value(left, "a")
        with pytest.raises(ValueConflictException):
            arena.set_digest(left, 5)
        assert arena[left].digest == 97

    def test_leaf_without_value_accepts_digest(self):
        """An empty leaf can carry an external digest."""
        arena, root_id = _perfect(1)
        root = arena.inner(root_id)
        arena.set_digest(root.left, 3)
        arena.set_digest(root.right, 5)
        assert arena[root.left].digest == 3
        assert root.digest == 15

    def test_root_digest_is_stored_directly(self):
        """A parentless node stores the digest without propagation."""
        arena, root_id = _perfect(1)
        arena.set_digest(root_id, 42)
        assert arena.inner(root_id).digest == 42
        assert arena.inner(root_id).pinned

    def test_none_digest_unpins_root(self):
        """Resetting the root digest to None removes the anchor."""
        arena, root_id = _perfect(1)
        root = arena.inner(root_id)
        arena.set_digest(root_id, 42)
        arena.set_digest(root_id, None)
        assert not root.pinned
        arena.set_leaf_value(root.left, "a")
        arena.set_leaf_value(root.right, "b")
        assert root.digest == 9506


class TestPropagation:
    """Tests for the upward propagation rule."""

    def test_pinned_root_is_not_recomputed(self):
        """A parentless node with a digest is never overwritten."""
        arena, root_id = _perfect(1)
        root = arena.inner(root_id)
        arena.set_digest(root_id, 1)
        arena.set_leaf_value(root.left, "a")
        arena.set_leaf_value(root.right, "b")
        assert root.digest == 1

    def test_pinned_root_survives_invalidation(self):
        """Clearing a leaf does not clear a pinned root."""
        arena, root_id = _perfect(1)
        root = arena.inner(root_id)
        arena.set_digest(root_id, 1)
        arena.set_leaf_value(root.left, "a")
        arena.set_leaf_value(root.left, None)
        assert root.digest == 1

    def test_invalidation_reaches_the_root(self):
        """Removing a leaf invalidates every derived ancestor."""
        arena, root_id = _perfect(2)
        root = arena.inner(root_id)
        left = arena.inner(root.left)
        right = arena.inner(root.right)
        for leaf_id, value in zip(
            (left.left, left.right, right.left, right.right), "abcd"
        ):
            arena.set_leaf_value(leaf_id, value)
        assert root.digest == 9506 * 9900

        arena.set_leaf_value(left.left, None)
        assert left.digest is None
        assert root.digest is None
        assert right.digest == 9900

    def test_inner_digest_combines_with_sibling(self):
        """A digest set on an inner node feeds its parent."""
        arena, root_id = _perfect(2)
        root = arena.inner(root_id)
        arena.set_digest(root.left, 7)
        assert root.digest is None
        arena.set_digest(root.right, 11)
        assert root.digest == 77

    def test_derived_root_is_not_pinned(self):
        """A root digest computed from its children is invalidated again."""
        arena, root_id = _perfect(1)
        root = arena.inner(root_id)
        arena.set_leaf_value(root.left, "a")
        arena.set_leaf_value(root.right, "b")
        assert root.digest == 9506
        assert not root.pinned

        arena.set_leaf_value(root.right, None)
        assert root.digest is None

    def test_recomputed_inner_node_loses_pin(self):
        """An inner digest set by hand is replaced once its children are known."""
        arena, root_id = _perfect(2)
        root = arena.inner(root_id)
        left = arena.inner(root.left)
        arena.set_digest(root.left, 7)
        assert left.pinned

        arena.set_leaf_value(left.left, "a")
        assert left.digest is None
        assert not left.pinned
