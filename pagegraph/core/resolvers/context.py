"""Per-build collaborators handed to every field resolver."""

from pagegraph.core.assets.fetcher import AssetFetcher
from pagegraph.core.assets.http_client import HttpClient
from pagegraph.core.links.link_resolver import LinkResolver
from pagegraph.core.node_store.node_store import NodeStore
from pagegraph.utils.cancellation import CancellationToken
from pagegraph.utils.reporter import Reporter


class ResolveContext:
    """
    What a resolver may consult: the graph, the network and the build state.

    Built once per build by the pipeline; resolvers must not keep references
    to it beyond their own invocation.
    """

    def __init__(
        self,
        store: NodeStore,
        links: LinkResolver,
        reporter: Reporter,
        fetcher: AssetFetcher | None = None,
        http: HttpClient | None = None,
        token: CancellationToken | None = None,
    ):
        self.store = store
        self.links = links
        self.reporter = reporter
        self.fetcher = fetcher
        self.http = http if http is not None else (fetcher.http if fetcher else None)
        self.token = token or CancellationToken()

    async def fetch_asset(self, locator: str):
        """Shortcut for fetcher.fetch_asset() bound to this build's reporter and token."""
        if self.fetcher is None:
            raise RuntimeError("No asset fetcher configured for this build")
        return await self.fetcher.fetch_asset(locator, reporter=self.reporter, token=self.token)
