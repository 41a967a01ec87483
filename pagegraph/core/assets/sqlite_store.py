"""
SQLite asset cache store implementation.

Durable locator-hash -> payload reference mapping using aiosqlite, so a
later build can skip the network for assets it already has.
"""

import asyncio
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite
from pydantic import ValidationError

from pagegraph.core.assets.base import AssetCacheStore
from pagegraph.models.asset import AssetRef
from pagegraph.utils.exceptions import StoreError
from pagegraph.utils.logger import get_logger

logger = get_logger(__name__)


class SQLiteAssetStore(AssetCacheStore):
    """
    SQLite-based asset cache store.

    Features:
    - Survives process restarts
    - WAL journal for concurrent readers
    - One row per locator hash, last write wins
    """

    def __init__(self, db_path: str = "data/asset_cache.db"):
        """
        Initialize SQLite asset store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None
        self._initialized = False
        self._init_lock = asyncio.Lock()

        # Ensure directory exists
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            await self.connection.execute("PRAGMA journal_mode = WAL")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Initialize database schema."""
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return
            await self.connect()
            await self.connection.execute(
                """
                CREATE TABLE IF NOT EXISTS assets (
                    locator_hash TEXT PRIMARY KEY,
                    locator TEXT NOT NULL,
                    payload_ref TEXT NOT NULL,
                    stored_at TEXT NOT NULL
                )
            """
            )
            await self.connection.commit()
            self._initialized = True

    async def get(self, locator_hash: str) -> AssetRef | None:
        """Look up a persisted payload reference."""
        await self.initialize()

        try:
            cursor = await self.connection.execute(
                "SELECT payload_ref FROM assets WHERE locator_hash = ?", (locator_hash,)
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(
                f"Failed to read asset {locator_hash}: {e}",
                context={"locator_hash": locator_hash},
            ) from e

        if not row:
            return None

        try:
            return AssetRef.model_validate_json(row[0])
        except ValidationError as e:
            # Unreadable rows are treated as misses; the next put replaces them.
            logger.warning(f"Ignoring corrupt asset cache row {locator_hash[:12]}: {e}")
            return None

    async def put(self, locator_hash: str, payload_ref: AssetRef) -> None:
        """Persist a payload reference."""
        await self.initialize()

        try:
            await self.connection.execute(
                """
                INSERT OR REPLACE INTO assets (locator_hash, locator, payload_ref, stored_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    locator_hash,
                    payload_ref.locator,
                    payload_ref.model_dump_json(),
                    datetime.now(UTC).isoformat(),
                ),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(
                f"Failed to persist asset {locator_hash}: {e}",
                context={"locator_hash": locator_hash},
            ) from e

        logger.debug(f"Persisted asset {locator_hash[:12]} -> {payload_ref.path}")

    async def delete(self, locator_hash: str) -> None:
        """Forget a payload reference."""
        await self.initialize()

        try:
            await self.connection.execute(
                "DELETE FROM assets WHERE locator_hash = ?", (locator_hash,)
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(
                f"Failed to delete asset {locator_hash}: {e}",
                context={"locator_hash": locator_hash},
            ) from e

    async def count(self) -> int:
        """Number of persisted assets."""
        await self.initialize()

        try:
            cursor = await self.connection.execute("SELECT COUNT(*) FROM assets")
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to count assets: {e}", context={"db_path": self.db_path}) from e
        return row[0]

    async def close(self) -> None:
        """Close the connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None
            self._initialized = False
