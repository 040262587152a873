"""
Digest Scheme Unit Tests
Tests for core/crypto/schemes.py
"""
import pytest

from core.crypto.hashing import int64_from_bytes, sha256
from core.crypto.schemes import (
    DEFAULT_SCHEME,
    DIGEST_SCHEMES,
    REFERENCE_SCHEME,
    SHA256_SCHEME,
    get_scheme,
)
from core.schemas.bodies import Cuboid


class TestReferenceScheme:
    """Tests for the reference (toy) scheme."""

    def test_is_default(self):
        assert DEFAULT_SCHEME is REFERENCE_SCHEME

    def test_leaf_digest_hashes_text(self):
        """The leaf digest is the string hash of str(value)."""
        assert REFERENCE_SCHEME.leaf_digest("a") == 97
        assert REFERENCE_SCHEME.leaf_digest(7) == 55

    def test_leaf_digest_of_body_uses_textual_form(self):
        body = Cuboid(length=1, width=2, height=3)
        assert REFERENCE_SCHEME.leaf_digest(body) == REFERENCE_SCHEME.leaf_digest(
            "Cuboid(1,2,3)"
        )

    def test_combine_is_product(self):
        assert REFERENCE_SCHEME.combine(97, 98) == 9506

    def test_combine_is_commutative(self):
        assert REFERENCE_SCHEME.commutative is True
        assert REFERENCE_SCHEME.combine(-3, 11) == REFERENCE_SCHEME.combine(11, -3)

    def test_combine_wraps_to_64_bits(self):
        assert REFERENCE_SCHEME.combine(2 ** 62, 4) == 0
        assert REFERENCE_SCHEME.combine(2 ** 62, 2) == -(2 ** 63)


class TestSha256Scheme:
    """Tests for the SHA-256 scheme."""

    def test_leaf_digest_of_string(self):
        assert SHA256_SCHEME.leaf_digest("a") == int64_from_bytes(sha256(b'"a"'))

    def test_leaf_digest_of_body_is_tagged(self):
        """Bodies are hashed as canonical JSON tagged with their kind."""
        body = Cuboid(length=1, width=2, height=3)
        expected = int64_from_bytes(
            sha256(b'{"height":3,"kind":"Cuboid","length":1,"width":2}')
        )
        assert SHA256_SCHEME.leaf_digest(body) == expected

    def test_combine_hashes_both_digests(self):
        expected = int64_from_bytes(sha256(b"\x00" * 7 + b"\x01" + b"\x00" * 7 + b"\x02"))
        assert SHA256_SCHEME.combine(1, 2) == expected

    def test_combine_is_order_sensitive(self):
        assert SHA256_SCHEME.commutative is False
        assert SHA256_SCHEME.combine(1, 2) != SHA256_SCHEME.combine(2, 1)

    def test_digests_are_signed_64_bit(self):
        value = SHA256_SCHEME.combine(-1, 2 ** 63 - 1)
        assert -(2 ** 63) <= value < 2 ** 63


class TestRegistry:
    """Tests for scheme lookup."""

    def test_registered_names(self):
        assert sorted(DIGEST_SCHEMES) == ["reference", "sha256"]

    @pytest.mark.parametrize("name", ["reference", "sha256"])
    def test_get_scheme(self, name):
        assert get_scheme(name).name == name

    def test_unknown_scheme(self):
        with pytest.raises(KeyError, match="Unknown digest scheme"):
            get_scheme("md5")
