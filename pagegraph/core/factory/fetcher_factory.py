"""
Factory for creating the remote asset fetcher.
"""

from pagegraph.config import Config
from pagegraph.core.assets.fetcher import AssetFetcher
from pagegraph.core.assets.http_client import HttpClient, HttpxClient
from pagegraph.core.factory.cache_factory import AssetStoreFactory


class AssetFetcherFactory:
    """Factory wiring the HTTP client and cache store into an AssetFetcher."""

    @staticmethod
    def create(config: Config, http: HttpClient | None = None) -> AssetFetcher:
        """
        Create asset fetcher from configuration.

        Args:
            config: Main configuration object
            http: Optional network collaborator (default: HttpxClient)

        Returns:
            AssetFetcher instance
        """
        if http is None:
            http = HttpxClient(
                timeout=config.fetcher.timeout,
                user_agent=config.fetcher.user_agent,
                follow_redirects=config.fetcher.follow_redirects,
            )

        return AssetFetcher(
            http=http,
            store=AssetStoreFactory.create(config.cache),
            asset_dir=config.fetcher.asset_dir,
        )
