"""
Book club site: authors, books, computed buy links and cover images.

Books are routed to /book/{series}/{name} or /book/{name}. Covers are looked
up on Open Library by ISBN and downloaded through the shared asset cache.
"""

from typing import Any

from pagegraph.config import Config
from pagegraph.core.assets.http_client import HttpClient
from pagegraph.core.registry.type_registry import TypeRegistry
from pagegraph.core.resolvers.context import ResolveContext
from pagegraph.core.resolvers.registry import ResolverRegistry
from pagegraph.models.asset import AssetRef
from pagegraph.models.node import Node
from pagegraph.models.page import PageRoute, StaticPage
from pagegraph.models.type_def import Cardinality, FieldSpec, FieldType, LinkSpec, TypeDefinition
from pagegraph.services.build_pipeline import BuildPipeline
from pagegraph.utils.exceptions import FetchError

OPEN_LIBRARY_ISBN_URL = "https://openlibrary.org/isbn/{isbn}.json"
OPEN_LIBRARY_COVER_URL = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"
POWELLS_SEARCH_URL = "https://www.powells.com/searchresults?keyword={isbn}"

AUTHORS: list[dict[str, Any]] = [
    {"slug": "n-k-jemisin", "name": "N. K. Jemisin"},
    {"slug": "blake-crouch", "name": "Blake Crouch"},
    {"slug": "fredrik-backman", "name": "Fredrik Backman"},
]

BOOKS: list[dict[str, Any]] = [
    {
        "isbn": 9780316229296,
        "name": "The Fifth Season",
        "author": "n-k-jemisin",
        "series": "The Broken Earth Trilogy",
        "seriesOrder": 1,
    },
    {
        "isbn": 9780316229265,
        "name": "The Obelisk Gate",
        "author": "n-k-jemisin",
        "series": "The Broken Earth Trilogy",
        "seriesOrder": 2,
    },
    {
        "isbn": 9780316229241,
        "name": "The Stone Sky",
        "author": "n-k-jemisin",
        "series": "The Broken Earth Trilogy",
        "seriesOrder": 3,
    },
    {
        "isbn": 9781101904244,
        "name": "Dark Matter",
        "author": "blake-crouch",
        "series": None,
        "seriesOrder": None,
    },
    {
        "isbn": 9781476738024,
        "name": "A Man Called Ove",
        "author": "fredrik-backman",
        "series": None,
        "seriesOrder": None,
    },
]

AUTHOR_TYPE = TypeDefinition(
    name="Author",
    key_field="slug",
    fields=[
        FieldSpec(name="name", type=FieldType.STRING),
        FieldSpec(name="slug", type=FieldType.STRING),
    ],
    links=[
        LinkSpec(
            name="books",
            source_field="slug",
            target_type="Book",
            target_field="author",
            cardinality=Cardinality.MANY,
        ),
    ],
)

BOOK_TYPE = TypeDefinition(
    name="Book",
    key_field="isbn",
    fields=[
        FieldSpec(name="isbn", type=FieldType.ID),
        FieldSpec(name="name", type=FieldType.STRING),
        FieldSpec(name="author", type=FieldType.STRING),
        FieldSpec(name="series", type=FieldType.STRING, nullable=True),
        FieldSpec(name="seriesOrder", type=FieldType.INT, nullable=True),
    ],
    links=[
        LinkSpec(
            name="author",
            source_field="author",
            target_type="Author",
            target_field="slug",
            cardinality=Cardinality.ONE,
        ),
    ],
)

BOOK_ROUTE = PageRoute(
    type_name="Book",
    category="book",
    template_id="book",
    title_field="name",
    group_field="series",
)

STATIC_PAGES = [
    StaticPage(
        path="/custom",
        template_id="custom",
        context={
            "title": "A Custom Page!",
            "meta": {"description": "A custom page with context."},
        },
    ),
]


def buy_link(node: Node, ctx: ResolveContext) -> str:
    """Powell's search URL for the book's ISBN."""
    return POWELLS_SEARCH_URL.format(isbn=node.attributes["isbn"])


async def cover(node: Node, ctx: ResolveContext) -> AssetRef | None:
    """
    Cover image of the book, downloaded into the asset cache.

    When Open Library lists several covers the first one is used.
    """
    isbn = node.attributes["isbn"]
    try:
        response = await ctx.token.guard(ctx.http.fetch(OPEN_LIBRARY_ISBN_URL.format(isbn=isbn)))
    except FetchError as e:
        ctx.reporter.record(e)
        return None

    if not response.ok:
        ctx.reporter.record(
            FetchError(
                f"Error loading details about {node.attributes['name']} - got "
                f"{response.status_code} {response.reason}".rstrip(),
                context={"node_id": node.id, "isbn": isbn, "status_code": response.status_code},
            )
        )
        return None

    covers = response.json().get("covers") or []
    if not covers:
        return None

    return await ctx.fetch_asset(OPEN_LIBRARY_COVER_URL.format(cover_id=covers[0]))


def register_types(registry: TypeRegistry) -> None:
    """Declare Author and Book."""
    registry.register_type(AUTHOR_TYPE)
    registry.register_type(BOOK_TYPE)


def register_resolvers(resolvers: ResolverRegistry) -> None:
    """Attach the computed Book fields."""
    resolvers.register("Book", "buyLink", buy_link, returns=str)
    resolvers.register("Book", "cover", cover, returns=AssetRef)


def sources() -> dict[str, list[dict[str, Any]]]:
    """Records per type, in ingestion order."""
    return {"Author": list(AUTHORS), "Book": list(BOOKS)}


def create_pipeline(config: Config | None = None, http: HttpClient | None = None) -> BuildPipeline:
    """
    Wire the book club site into a BuildPipeline.

    Args:
        config: Configuration (default: Config())
        http: Optional network collaborator (default: HttpxClient from config)

    Returns:
        Ready-to-run pipeline
    """
    config = config or Config()
    registry = TypeRegistry()
    register_types(registry)
    resolvers = ResolverRegistry()
    register_resolvers(resolvers)

    return BuildPipeline.from_config(
        config,
        registry=registry,
        resolvers=resolvers,
        routes=[BOOK_ROUTE],
        static_pages=STATIC_PAGES,
        http=http,
    )
