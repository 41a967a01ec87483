"""
Factory for creating asset cache store backends.
"""

from pagegraph.config import CacheConfig
from pagegraph.core.assets.base import AssetCacheStore
from pagegraph.core.assets.memory_store import InMemoryAssetStore
from pagegraph.core.assets.sqlite_store import SQLiteAssetStore
from pagegraph.utils.exceptions import ConfigurationError


class AssetStoreFactory:
    """Factory for creating asset cache stores from configuration."""

    @staticmethod
    def create(config: CacheConfig) -> AssetCacheStore:
        """
        Create asset cache store from configuration.

        Args:
            config: Cache configuration

        Returns:
            Asset cache store instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.backend == "memory":
            return InMemoryAssetStore()
        elif config.backend == "sqlite":
            return SQLiteAssetStore(db_path=config.db_path)
        else:
            raise ConfigurationError(
                f"Unsupported asset cache backend: {config.backend}",
                context={"backend": config.backend},
            )
