"""
Remote asset fetcher with a shared, single-flight cache.

Entries are keyed by the hash of the locator, not by the requesting node, so
every node asking for the same URL shares one download. The check-and-create
step runs under a per-locator lock; unrelated locators never contend.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from urllib.parse import urlparse

from pagegraph.core.assets.base import AssetCacheStore
from pagegraph.core.assets.http_client import HttpClient, HttpResponse
from pagegraph.models.asset import AssetCacheEntry, AssetRef, AssetStatus
from pagegraph.utils.cancellation import CancellationToken
from pagegraph.utils.exceptions import BuildCancelled, FetchError, StoreError
from pagegraph.utils.id_generator import hash_locator
from pagegraph.utils.logger import get_logger
from pagegraph.utils.reporter import Reporter

logger = get_logger(__name__)


class AssetFetcher:
    """
    Retrieves external resources and caches them across nodes and builds.

    Lifecycle per locator:
    - success: returned immediately, no network
    - pending: callers join the in-flight retrieval
    - failed / absent: a new retrieval starts (after consulting the store)
    """

    def __init__(
        self,
        http: HttpClient,
        store: AssetCacheStore,
        asset_dir: str | Path = ".cache/assets",
    ):
        """
        Initialize asset fetcher.

        Args:
            http: Network collaborator
            store: Persistent locator-hash -> AssetRef store
            asset_dir: Directory receiving downloaded payloads
        """
        self.http = http
        self.store = store
        self.asset_dir = Path(asset_dir)

        self._entries: dict[str, AssetCacheEntry] = {}
        self._waiters: dict[str, asyncio.Future] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self.network_calls = 0

    def entry(self, locator: str) -> AssetCacheEntry | None:
        """Current cache entry for a locator, if any."""
        return self._entries.get(hash_locator(locator))

    async def fetch_asset(
        self,
        locator: str,
        reporter: Reporter | None = None,
        token: CancellationToken | None = None,
    ) -> AssetRef | None:
        """
        Fetch a remote asset, reusing cached or in-flight results.

        Args:
            locator: Asset URL
            reporter: Sink for FetchError warnings
            token: Cancellation token of the requesting build

        Returns:
            AssetRef, or None when the asset is unavailable or empty

        Raises:
            BuildCancelled: If the token fires while waiting
        """
        key = hash_locator(locator)
        async with self._locked(key):
            if token:
                token.raise_if_cancelled()

            entry = self._entries.get(key)
            if entry is not None and entry.status == AssetStatus.SUCCESS:
                logger.debug(f"Asset cache hit for {locator}")
                return entry.payload_ref

            if entry is not None and entry.status == AssetStatus.PENDING:
                waiter = self._waiters[key]
                owner = False
            else:
                persisted = await self.store.get(key)
                if persisted is not None and persisted.exists():
                    self._entries[key] = AssetCacheEntry(
                        locator_hash=key, status=AssetStatus.SUCCESS, payload_ref=persisted
                    )
                    logger.debug(f"Asset restored from cache store: {locator}")
                    return persisted

                waiter = asyncio.get_running_loop().create_future()
                self._entries[key] = AssetCacheEntry(locator_hash=key)
                self._waiters[key] = waiter
                owner = True

        if not owner:
            logger.debug(f"Joining in-flight fetch for {locator}")
            joined = asyncio.shield(waiter)
            try:
                return await (token.guard(joined) if token else joined)
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if not waiter.cancelled() or (current is not None and current.cancelling()):
                    raise
                # The owning build was cancelled, not this caller: start over.
                logger.info(f"In-flight fetch for {locator} was cancelled by its owner, retrying")
                return await self.fetch_asset(locator, reporter=reporter, token=token)

        try:
            ref = await self._retrieve(locator, key, reporter, token)
        except BaseException as e:
            # Never leave a pending entry behind; the next attempt starts clean.
            self._entries.pop(key, None)
            self._waiters.pop(key, None)
            if isinstance(e, Exception) and not isinstance(e, BuildCancelled):
                waiter.set_exception(e)
                waiter.exception()  # joiners are optional; mark as retrieved
            else:
                waiter.cancel()
            raise

        self._waiters.pop(key, None)
        waiter.set_result(ref)
        return ref

    @asynccontextmanager
    async def _locked(self, key: str) -> AsyncIterator[None]:
        """Hold the per-locator lock, dropping it once no caller references it."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def evict(self, locator: str) -> None:
        """Drop a locator from memory and from the persistent store."""
        key = hash_locator(locator)
        async with self._locked(key):
            entry = self._entries.get(key)
            if entry is not None and entry.status == AssetStatus.PENDING:
                return
            self._entries.pop(key, None)
            await self.store.delete(key)

    async def close(self) -> None:
        """Close the network collaborator and the cache store."""
        await self.http.close()
        await self.store.close()

    # ═══════════════════════════════════════════════════════════
    # RETRIEVAL
    # ═══════════════════════════════════════════════════════════

    async def _retrieve(
        self,
        locator: str,
        key: str,
        reporter: Reporter | None,
        token: CancellationToken | None,
    ) -> AssetRef | None:
        self.network_calls += 1
        logger.info(f"Fetching asset {locator}")

        try:
            request = self.http.fetch(locator)
            response = await (token.guard(request) if token else request)
        except BuildCancelled:
            raise
        except FetchError as e:
            return self._fail(key, e, reporter)
        except Exception as e:
            return self._fail(
                key,
                FetchError(
                    f"Transport failure fetching {locator}: {e}",
                    context={"url": locator, "error_type": type(e).__name__},
                ),
                reporter,
            )

        if not response.ok:
            return self._fail(
                key,
                FetchError(
                    f"Error fetching {locator}: got {response.status_code} {response.reason}".rstrip(),
                    context={"url": locator, "status_code": response.status_code},
                ),
                reporter,
            )

        if not response.body:
            logger.info(f"Asset {locator} has no payload")
            self._entries[key] = AssetCacheEntry(locator_hash=key, status=AssetStatus.SUCCESS)
            return None

        ref = await asyncio.to_thread(self._write_payload, locator, key, response)
        await self.store.put(key, ref)
        self._entries[key] = AssetCacheEntry(
            locator_hash=key, status=AssetStatus.SUCCESS, payload_ref=ref
        )
        logger.info(f"Stored asset {locator} ({ref.size} bytes)")
        return ref

    def _write_payload(self, locator: str, key: str, response: HttpResponse) -> AssetRef:
        suffix = Path(urlparse(locator).path).suffix
        path = self.asset_dir / f"{key}{suffix}"
        try:
            self.asset_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(response.body)
        except OSError as e:
            raise StoreError(
                f"Failed to write asset payload to {path}: {e}",
                context={"url": locator, "path": str(path)},
            ) from e

        return AssetRef(
            locator=locator,
            locator_hash=key,
            path=str(path),
            content_type=response.content_type,
            size=len(response.body),
        )

    def _fail(self, key: str, error: FetchError, reporter: Reporter | None) -> None:
        self._entries[key] = AssetCacheEntry(locator_hash=key, status=AssetStatus.FAILED)
        if reporter is not None:
            reporter.record(error)
        else:
            logger.warning(f"FetchError: {error.message}")
        return None
