"""
Shared test fixtures.

The network is never touched: FakeHttpClient serves canned responses,
records every requested URL and can hold requests open on a gate so tests
can observe concurrent callers.
"""

import asyncio
import json

import pytest

from pagegraph.core.assets import AssetFetcher, HttpClient, HttpResponse, InMemoryAssetStore
from pagegraph.core.node_store import NodeStore
from pagegraph.core.registry import TypeRegistry
from pagegraph.sites import book_club
from pagegraph.utils.reporter import Reporter


class FakeHttpClient(HttpClient):
    """In-memory HttpClient with call recording."""

    def __init__(self):
        self.responses: dict[str, HttpResponse | Exception] = {}
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None
        self.closed = False

    def add_json(self, url: str, payload, status_code: int = 200, reason: str = "OK") -> None:
        self.responses[url] = HttpResponse(
            ok=200 <= status_code < 300,
            status_code=status_code,
            reason=reason,
            body=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )

    def add_bytes(
        self,
        url: str,
        body: bytes,
        status_code: int = 200,
        reason: str = "OK",
        content_type: str = "image/jpeg",
    ) -> None:
        self.responses[url] = HttpResponse(
            ok=200 <= status_code < 300,
            status_code=status_code,
            reason=reason,
            body=body,
            headers={"Content-Type": content_type},
        )

    def add_error(self, url: str, error: Exception) -> None:
        self.responses[url] = error

    def call_count(self, url: str) -> int:
        return self.calls.count(url)

    async def fetch(self, url: str) -> HttpResponse:
        self.calls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        response = self.responses.get(url)
        if response is None:
            return HttpResponse(ok=False, status_code=404, reason="Not Found")
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_http() -> FakeHttpClient:
    """Fresh fake network collaborator."""
    return FakeHttpClient()


@pytest.fixture
def registry() -> TypeRegistry:
    """Registry with the book club types."""
    registry = TypeRegistry()
    book_club.register_types(registry)
    return registry


@pytest.fixture
def store(registry) -> NodeStore:
    """Node store with the book club records ingested."""
    store = NodeStore(registry)
    for type_name, records in book_club.sources().items():
        store.ingest(type_name, records)
    return store


@pytest.fixture
def reporter() -> Reporter:
    return Reporter()


@pytest.fixture
def asset_store() -> InMemoryAssetStore:
    return InMemoryAssetStore()


@pytest.fixture
def fetcher(fake_http, asset_store, tmp_path) -> AssetFetcher:
    """Asset fetcher writing payloads under tmp_path."""
    return AssetFetcher(http=fake_http, store=asset_store, asset_dir=tmp_path / "assets")
