"""
Factory modules for creating PageGraph components.

Provides factories for the asset cache store and the asset fetcher.
"""

from pagegraph.core.factory.cache_factory import AssetStoreFactory
from pagegraph.core.factory.fetcher_factory import AssetFetcherFactory

__all__ = [
    "AssetStoreFactory",
    "AssetFetcherFactory",
]
