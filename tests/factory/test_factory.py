"""
Tests for factory classes.

Tests the creation of components using factories.
"""

import pytest

from pagegraph.config import CacheConfig, Config, FetcherConfig
from pagegraph.core.assets import (
    AssetCacheStore,
    AssetFetcher,
    HttpxClient,
    InMemoryAssetStore,
    SQLiteAssetStore,
)
from pagegraph.core.factory import AssetFetcherFactory, AssetStoreFactory
from pagegraph.utils.exceptions import ConfigurationError


class TestAssetStoreFactory:
    """Test asset cache store factory."""

    def test_create_memory_store(self):
        store = AssetStoreFactory.create(CacheConfig(backend="memory"))

        assert isinstance(store, InMemoryAssetStore)
        assert isinstance(store, AssetCacheStore)

    def test_create_sqlite_store(self, tmp_path):
        db_path = str(tmp_path / "assets.db")

        store = AssetStoreFactory.create(CacheConfig(backend="sqlite", db_path=db_path))

        assert isinstance(store, SQLiteAssetStore)
        assert store.db_path == db_path

    def test_unsupported_backend_raises_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            AssetStoreFactory.create(CacheConfig(backend="redis"))

        assert "Unsupported asset cache backend" in str(exc_info.value)


class TestAssetFetcherFactory:
    """Test asset fetcher factory."""

    @pytest.mark.asyncio
    async def test_create_default_http_client(self, tmp_path):
        config = Config(
            fetcher=FetcherConfig(timeout=5.0, asset_dir=str(tmp_path / "assets")),
        )

        fetcher = AssetFetcherFactory.create(config)
        try:
            assert isinstance(fetcher, AssetFetcher)
            assert isinstance(fetcher.http, HttpxClient)
            assert fetcher.http.timeout == 5.0
            assert isinstance(fetcher.store, InMemoryAssetStore)
            assert fetcher.asset_dir == tmp_path / "assets"
        finally:
            await fetcher.close()

    def test_create_with_injected_http(self, fake_http):
        fetcher = AssetFetcherFactory.create(Config(), http=fake_http)

        assert fetcher.http is fake_http
