"""
Build pipeline - runs one content-graph build end to end.

Phases, in order:
1. Ingest records into a fresh NodeStore
2. Validate every declared link target
3. Resolve computed fields of page-eligible nodes (concurrent, bounded)
4. Generate page descriptors

Fatal errors propagate to the caller with their context. Recoverable ones
(LinkAmbiguity, ResolverError, FetchError) are returned as warnings.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pagegraph.config import Config
from pagegraph.core.assets.fetcher import AssetFetcher
from pagegraph.core.assets.http_client import HttpClient
from pagegraph.core.factory import AssetFetcherFactory
from pagegraph.core.links.link_resolver import LinkResolver
from pagegraph.core.node_store.node_store import NodeStore
from pagegraph.core.pages.generator import PageGenerator
from pagegraph.core.registry.type_registry import TypeRegistry
from pagegraph.core.resolvers.context import ResolveContext
from pagegraph.core.resolvers.engine import FieldResolverEngine
from pagegraph.core.resolvers.registry import ResolverRegistry
from pagegraph.models.page import PageRoute, StaticPage
from pagegraph.models.report import BuildResult
from pagegraph.utils.cancellation import CancellationToken
from pagegraph.utils.logger import get_logger
from pagegraph.utils.reporter import Reporter

logger = get_logger(__name__)


class BuildPipeline:
    """
    Site build orchestrator.

    The registry, resolver table, routes and fetcher are long-lived; every
    run() gets its own NodeStore, Reporter and resolver engine.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        resolvers: ResolverRegistry,
        fetcher: AssetFetcher | None = None,
        routes: Iterable[PageRoute] = (),
        static_pages: Iterable[StaticPage] = (),
        config: Config | None = None,
    ):
        """
        Initialize build pipeline.

        Args:
            registry: Declared types
            resolvers: Computed-field dispatch table
            fetcher: Shared asset fetcher (may outlive the pipeline)
            routes: Page routes for page-eligible types
            static_pages: Pages not derived from nodes
            config: Configuration object
        """
        self.registry = registry
        self.resolvers = resolvers
        self.fetcher = fetcher
        self.routes = list(routes)
        self.static_pages = list(static_pages)
        self.config = config or Config()

    @classmethod
    def from_config(
        cls,
        config: Config,
        registry: TypeRegistry,
        resolvers: ResolverRegistry,
        routes: Iterable[PageRoute] = (),
        static_pages: Iterable[StaticPage] = (),
        http: HttpClient | None = None,
    ) -> "BuildPipeline":
        """Create a pipeline whose fetcher and cache store come from configuration."""
        return cls(
            registry=registry,
            resolvers=resolvers,
            fetcher=AssetFetcherFactory.create(config, http=http),
            routes=routes,
            static_pages=static_pages,
            config=config,
        )

    async def run(
        self,
        sources: Mapping[str, Iterable[dict[str, Any]]],
        token: CancellationToken | None = None,
    ) -> BuildResult:
        """
        Run a full build.

        Args:
            sources: Records per type name, ingested in mapping order
            token: Cancellation token; firing it aborts the build

        Returns:
            BuildResult with ordered pages and collected warnings

        Raises:
            SchemaViolation, IdentityConflict, UnknownLinkTarget, PathCollision,
            BuildCancelled: Fatal conditions, with offending ids in .context
        """
        token = token or CancellationToken()
        reporter = Reporter()
        store = NodeStore(self.registry)

        try:
            logger.info("Build started: ingesting records")
            for type_name, records in sources.items():
                token.raise_if_cancelled()
                store.ingest(type_name, records)

            self.registry.validate_links()

            links = LinkResolver(store, self.registry, reporter)
            context = ResolveContext(
                store=store,
                links=links,
                reporter=reporter,
                fetcher=self.fetcher,
                token=token,
            )
            engine = FieldResolverEngine(
                self.resolvers,
                context,
                concurrency_limit=self.config.build.concurrency_limit,
            )

            logger.info("Resolving computed fields")
            nodes = [node for route in self.routes for node in store.query_by_type(route.type_name)]
            await engine.resolve_all(nodes)

            token.raise_if_cancelled()
            logger.info("Generating pages")
            pages = PageGenerator(store, links).generate(self.routes, self.static_pages)

            result = BuildResult(
                pages=pages,
                warnings=reporter.warnings,
                node_count=len(store),
                nodes={node.id: {**node.attributes, **node.resolved} for node in nodes},
                site=self.config.site.model_dump(),
            )
        finally:
            store.close()

        logger.info(
            f"Build finished: {len(result.pages)} pages, {len(result.warnings)} warnings"
        )
        return result

    async def close(self) -> None:
        """Close the fetcher's network client and cache store."""
        if self.fetcher is not None:
            await self.fetcher.close()
