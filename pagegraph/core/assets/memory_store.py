"""In-memory asset cache store for single-run builds and tests."""

from pagegraph.core.assets.base import AssetCacheStore
from pagegraph.models.asset import AssetRef


class InMemoryAssetStore(AssetCacheStore):
    """Dictionary-backed AssetCacheStore."""

    def __init__(self):
        self._refs: dict[str, AssetRef] = {}

    async def get(self, locator_hash: str) -> AssetRef | None:
        return self._refs.get(locator_hash)

    async def put(self, locator_hash: str, payload_ref: AssetRef) -> None:
        self._refs[locator_hash] = payload_ref

    async def delete(self, locator_hash: str) -> None:
        self._refs.pop(locator_hash, None)

    def __len__(self) -> int:
        return len(self._refs)
