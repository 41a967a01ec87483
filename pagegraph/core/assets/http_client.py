"""
Network collaborator for remote assets.

The asset fetcher and async resolvers depend only on HttpClient.fetch(),
which reports the status instead of raising on non-success codes.
"""

import json
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import BaseModel, Field

from pagegraph.utils.exceptions import FetchError
from pagegraph.utils.logger import get_logger

logger = get_logger(__name__)


class HttpResponse(BaseModel):
    """Minimal response contract."""

    ok: bool
    status_code: int
    reason: str = ""
    body: bytes = b""
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def content_type(self) -> str | None:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value.split(";")[0].strip()
        return None

    def json(self) -> Any:
        """
        Decode the body as JSON.

        Raises:
            ValueError: If the body is not valid JSON
        """
        return json.loads(self.body.decode("utf-8"))


class HttpClient(ABC):
    """Abstract network collaborator."""

    @abstractmethod
    async def fetch(self, url: str) -> HttpResponse:
        """
        Retrieve a URL.

        Args:
            url: Absolute URL

        Returns:
            HttpResponse for any received status

        Raises:
            FetchError: On transport failure (DNS, connection, timeout)
        """
        pass

    @abstractmethod
    async def close(self):
        """Close any open connections."""
        pass


class HttpxClient(HttpClient):
    """HttpClient backed by a shared httpx.AsyncClient."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "PageGraph/0.1",
        follow_redirects: bool = True,
    ):
        """
        Initialize httpx client.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
            follow_redirects: Follow 3xx responses
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=follow_redirects,
            headers={"User-Agent": user_agent},
        )

    async def fetch(self, url: str) -> HttpResponse:
        try:
            response = await self.client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(
                f"Timed out after {self.timeout}s fetching {url}",
                context={"url": url, "error_type": type(e).__name__},
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(
                f"Transport failure fetching {url}: {e}",
                context={"url": url, "error_type": type(e).__name__},
            ) from e

        logger.debug(f"GET {url} -> {response.status_code}")
        return HttpResponse(
            ok=response.is_success,
            status_code=response.status_code,
            reason=response.reason_phrase,
            body=response.content,
            headers=dict(response.headers),
        )

    async def close(self):
        await self.client.aclose()
