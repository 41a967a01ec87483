"""Tests for LinkResolver."""

import pytest

from pagegraph.core.links import LinkResolver
from pagegraph.core.node_store import NodeStore
from pagegraph.core.registry import TypeRegistry
from pagegraph.models.type_def import FieldSpec, FieldType, LinkSpec, TypeDefinition
from pagegraph.sites import book_club
from pagegraph.utils.exceptions import UnknownLinkTarget


def book_named(store, name):
    return next(node for node in store.query_by_type("Book") if node.get("name") == name)


def author_named(store, slug):
    return store.query_by_field("Author", "slug", slug)[0]


class TestLinkResolver:
    """Test relation resolution."""

    def test_one_link(self, store, registry, reporter):
        links = LinkResolver(store, registry, reporter)

        author = links.resolve(book_named(store, "Dark Matter"), "author")

        assert author.get("name") == "Blake Crouch"
        assert len(reporter) == 0

    def test_many_link_ordered_by_id(self, store, registry):
        links = LinkResolver(store, registry)

        books = links.resolve(author_named(store, "n-k-jemisin"), "books")

        assert len(books) == 3
        assert [book.id for book in books] == sorted(book.id for book in books)

    def test_many_link_no_matches(self, store, registry):
        store.ingest("Author", [{"slug": "becky-chambers", "name": "Becky Chambers"}])
        links = LinkResolver(store, registry)

        assert links.resolve(author_named(store, "becky-chambers"), "books") == []

    def test_one_link_zero_matches(self, store, registry):
        store.ingest(
            "Book",
            [{"isbn": 1, "name": "Orphan", "author": "nobody"}],
        )
        links = LinkResolver(store, registry)

        assert links.resolve(book_named(store, "Orphan"), "author") is None

    def test_ambiguous_one_link_picks_lowest_id(self, store, registry, reporter):
        # Two Book nodes by the same author make Book-side lookups by author ambiguous
        registry.register_type(
            TypeDefinition(
                name="Review",
                key_field="id",
                fields=[
                    FieldSpec(name="id", type=FieldType.ID),
                    FieldSpec(name="author", type=FieldType.STRING),
                ],
                links=[
                    LinkSpec(
                        name="book",
                        source_field="author",
                        target_type="Book",
                        target_field="author",
                    )
                ],
            )
        )
        store.ingest("Review", [{"id": 1, "author": "n-k-jemisin"}])
        review = store.query_by_type("Review")[0]
        links = LinkResolver(store, registry, reporter)

        selected = links.resolve(review, "book")

        candidates = sorted(book.id for book in store.query_by_field("Book", "author", "n-k-jemisin"))
        assert selected.id == candidates[0]
        assert len(reporter) == 1
        warning = reporter.warnings[0]
        assert warning.kind == "LinkAmbiguity"
        assert warning.context["candidates"] == candidates
        assert warning.context["selected"] == candidates[0]

    def test_null_source_value(self, registry):
        registry.register_type(
            TypeDefinition(
                name="Series",
                key_field="title",
                fields=[
                    FieldSpec(name="title", type=FieldType.STRING),
                    FieldSpec(name="firstBook", type=FieldType.ID, nullable=True),
                ],
                links=[
                    LinkSpec(source_field="firstBook", target_type="Book", target_field="isbn"),
                ],
            )
        )
        store = NodeStore(registry)
        store.ingest("Series", [{"title": "Unstarted"}])
        links = LinkResolver(store, registry)

        assert links.resolve(store.query_by_type("Series")[0], "firstBook") is None

    def test_deterministic_across_calls(self, store, registry):
        links = LinkResolver(store, registry)
        author = author_named(store, "n-k-jemisin")

        assert [b.id for b in links.resolve(author, "books")] == [
            b.id for b in links.resolve(author, "books")
        ]

    def test_resolve_one_on_many_link(self, store, registry):
        links = LinkResolver(store, registry)
        author = author_named(store, "n-k-jemisin")

        assert links.resolve_one(author, "books").id == links.resolve(author, "books")[0].id

    def test_unknown_link(self, store, registry):
        links = LinkResolver(store, registry)

        with pytest.raises(UnknownLinkTarget):
            links.resolve(book_named(store, "Dark Matter"), "publisher")

    def test_unregistered_target_fails_on_use(self):
        registry = TypeRegistry()
        registry.register_type(book_club.AUTHOR_TYPE)
        store = NodeStore(registry)
        store.ingest("Author", book_club.AUTHORS)
        links = LinkResolver(store, registry)

        with pytest.raises(UnknownLinkTarget):
            links.resolve(store.query_by_type("Author")[0], "books")
