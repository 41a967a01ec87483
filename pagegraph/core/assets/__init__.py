"""
Remote asset fetching and caching for PageGraph.

Available cache stores:
- InMemoryAssetStore: Single-run, process-local
- SQLiteAssetStore: Durable across builds
"""

from pagegraph.core.assets.base import AssetCacheStore
from pagegraph.core.assets.fetcher import AssetFetcher
from pagegraph.core.assets.http_client import HttpClient, HttpResponse, HttpxClient
from pagegraph.core.assets.memory_store import InMemoryAssetStore
from pagegraph.core.assets.sqlite_store import SQLiteAssetStore

__all__ = [
    "AssetCacheStore",
    "AssetFetcher",
    "HttpClient",
    "HttpResponse",
    "HttpxClient",
    "InMemoryAssetStore",
    "SQLiteAssetStore",
]
