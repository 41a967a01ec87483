"""
Tests for identity and digest utilities.

Tests cover:
1. Node ID determinism
2. Content digest determinism and key-order independence
3. Locator hashing
"""

from uuid import UUID

from pagegraph.utils import (
    canonical_json,
    compute_content_digest,
    generate_node_id,
    hash_locator,
)


class TestGenerateNodeId:
    """Tests for Node ID generation."""

    def test_format(self):
        """Node IDs are UUID strings."""
        node_id = generate_node_id("Book", 9780316229296)

        assert str(UUID(node_id)) == node_id

    def test_deterministic(self):
        """Same type and key always give the same id."""
        ids = {generate_node_id("Author", "n-k-jemisin") for _ in range(100)}
        assert len(ids) == 1

    def test_type_is_part_of_identity(self):
        """The same key under different types gives different ids."""
        assert generate_node_id("Author", "dark-matter") != generate_node_id("Book", "dark-matter")

    def test_different_keys(self):
        """Different keys give different ids."""
        assert generate_node_id("Book", 1) != generate_node_id("Book", 2)


class TestContentDigest:
    """Tests for content digests."""

    def test_equal_attributes_equal_digest(self):
        """Identical attributes produce identical digests."""
        first = {"name": "The Fifth Season", "isbn": 9780316229296, "series": None}
        second = {"name": "The Fifth Season", "isbn": 9780316229296, "series": None}

        assert compute_content_digest(first) == compute_content_digest(second)

    def test_key_order_does_not_matter(self):
        """Insertion order of keys is irrelevant."""
        first = {"a": 1, "b": [1, 2], "c": {"x": "y"}}
        second = {"c": {"x": "y"}, "b": [1, 2], "a": 1}

        assert compute_content_digest(first) == compute_content_digest(second)

    def test_different_values_differ(self):
        """Any value change changes the digest."""
        assert compute_content_digest({"seriesOrder": 1}) != compute_content_digest(
            {"seriesOrder": 2}
        )

    def test_equal_numbers_equal_digest(self):
        """Numbers that compare equal hash the same, at any depth."""
        assert compute_content_digest({"price": 1}) == compute_content_digest({"price": 1.0})
        assert compute_content_digest({"tags": [{"n": 2}]}) == compute_content_digest(
            {"tags": [{"n": 2.0}]}
        )
        assert compute_content_digest({"price": 1.5}) != compute_content_digest({"price": 1})

    def test_digest_is_sha256_hex(self):
        digest = compute_content_digest({"name": "Dark Matter"})

        assert len(digest) == 64
        int(digest, 16)

    def test_canonical_json_is_compact_and_sorted(self):
        assert canonical_json({"b": 1, "a": None}) == '{"a":null,"b":1}'


class TestHashLocator:
    """Tests for asset locator hashing."""

    def test_deterministic(self):
        url = "https://covers.openlibrary.org/b/id/8231856-L.jpg"
        assert hash_locator(url) == hash_locator(url)

    def test_distinct_locators(self):
        assert hash_locator("https://a.example/1.jpg") != hash_locator("https://a.example/2.jpg")
