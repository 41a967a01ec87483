"""
Explicit cancellation for build runs.

A CancellationToken is threaded through resolvers and the asset fetcher.
Network-bound awaits are raced against it with guard(), so an aborted build
unwinds at the next suspension point instead of waiting for slow requests.
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from pagegraph.utils.exceptions import BuildCancelled

T = TypeVar("T")


class CancellationToken:
    """Cooperative cancellation signal shared by every task of one build."""

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: str | None = None

    def cancel(self, reason: str = "build aborted") -> None:
        """Fire the token. Idempotent; the first reason wins."""
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """
        Raises:
            BuildCancelled: If the token has fired
        """
        if self._event.is_set():
            raise BuildCancelled(f"Build cancelled: {self.reason}", context={"reason": self.reason})

    async def wait(self) -> None:
        """Block until the token fires."""
        await self._event.wait()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """
        Await awaitable unless the token fires first.

        The inner operation is cancelled when the token wins the race.

        Raises:
            BuildCancelled: If the token fired before the awaitable completed
        """
        if self.cancelled and asyncio.iscoroutine(awaitable):
            awaitable.close()
        self.raise_if_cancelled()
        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not work.done():
                work.cancel()
        if work not in done or (work.cancelled() and self.cancelled):
            self.raise_if_cancelled()
        return work.result()
