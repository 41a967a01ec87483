"""
Base interface for persistent asset cache storage.

Keys are locator hashes; values are AssetRefs. Implementations may be
in-memory for a single run or durable across runs; the fetcher cannot tell.
"""

from abc import ABC, abstractmethod

from pagegraph.models.asset import AssetRef


class AssetCacheStore(ABC):
    """Abstract key-value store backing the asset cache."""

    async def initialize(self) -> None:
        """Prepare the store (create tables, open connections)."""
        pass

    @abstractmethod
    async def get(self, locator_hash: str) -> AssetRef | None:
        """
        Look up a persisted payload reference.

        Args:
            locator_hash: Hash of the asset locator

        Returns:
            AssetRef or None if never stored
        """
        pass

    @abstractmethod
    async def put(self, locator_hash: str, payload_ref: AssetRef) -> None:
        """
        Persist a payload reference.

        Args:
            locator_hash: Hash of the asset locator
            payload_ref: Reference to the stored payload
        """
        pass

    @abstractmethod
    async def delete(self, locator_hash: str) -> None:
        """
        Forget a payload reference (eviction is driven by the caller).

        Args:
            locator_hash: Hash of the asset locator
        """
        pass

    async def close(self) -> None:
        """Release resources."""
        pass
