"""
Field resolver engine.

Guarantees per build:
- a resolver runs at most once per (node, field); later calls read the memo
- concurrent callers for the same pair join one in-flight task
- a failing resolver yields None plus a ResolverError warning
- asynchronous resolvers run under a semaphore; synchronous ones run inline
"""

import asyncio
import inspect
from collections.abc import Iterable
from typing import Any

from pagegraph.core.resolvers.context import ResolveContext
from pagegraph.core.resolvers.registry import FieldResolver, ResolverRegistry
from pagegraph.models.node import Node
from pagegraph.utils.exceptions import BuildCancelled, ConfigurationError, ResolverError
from pagegraph.utils.logger import get_logger

logger = get_logger(__name__)


class FieldResolverEngine:
    """Computes resolver-backed fields for the nodes of one build."""

    def __init__(
        self,
        registry: ResolverRegistry,
        context: ResolveContext,
        concurrency_limit: int = 4,
    ):
        """
        Initialize resolver engine.

        Args:
            registry: Dispatch table of resolvers
            context: Collaborators passed to each resolver
            concurrency_limit: Maximum concurrently running async resolvers

        Raises:
            ConfigurationError: If concurrency_limit < 1
        """
        if concurrency_limit < 1:
            raise ConfigurationError(
                f"concurrency_limit must be at least 1, got {concurrency_limit}",
                context={"concurrency_limit": concurrency_limit},
            )

        self.registry = registry
        self.context = context
        self.concurrency_limit = concurrency_limit
        self.invocations = 0

        self._semaphore = asyncio.Semaphore(concurrency_limit)
        self._in_flight: dict[tuple[str, str], asyncio.Task] = {}

    async def resolve_field(self, node: Node, field_name: str) -> Any:
        """
        Resolve one field of one node.

        Args:
            node: Node to resolve for
            field_name: Resolver-backed field

        Returns:
            The field value, or None if the resolver failed

        Raises:
            ResolverNotFound: If no resolver is registered for the field
            BuildCancelled: If the build was aborted
        """
        if node.is_resolved(field_name):
            return node.resolved_value(field_name)

        resolver = self.registry.get(node.type_name, field_name)

        if not resolver.is_async:
            self.context.token.raise_if_cancelled()
            value = self._invoke_sync(resolver, node)
            node.memoize(field_name, value)
            return value

        key = (node.id, field_name)
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run_async(resolver, node))
            self._in_flight[key] = task
            task.add_done_callback(lambda _, key=key: self._in_flight.pop(key, None))
        else:
            logger.debug(f"Joining in-flight resolution of {node.type_name}.{field_name} for {node.id}")

        return await asyncio.shield(task)

    async def resolve_node(self, node: Node, fields: Iterable[str] | None = None) -> dict[str, Any]:
        """
        Resolve several fields of a node concurrently.

        Args:
            node: Node to resolve for
            fields: Fields to resolve (default: every registered field of the type)

        Returns:
            Mapping of field name to value
        """
        names = list(fields) if fields is not None else self.registry.fields_for(node.type_name)
        values = await asyncio.gather(*(self.resolve_field(node, name) for name in names))
        return dict(zip(names, values))

    async def resolve_all(self, nodes: Iterable[Node], fields: Iterable[str] | None = None) -> None:
        """
        Resolve fields for many nodes with bounded concurrency.

        On the first fatal error or cancellation every in-flight task is
        cancelled before the error propagates.

        Args:
            nodes: Nodes to resolve
            fields: Fields to resolve (default: every registered field per type)
        """
        field_names = list(fields) if fields is not None else None
        tasks = [
            asyncio.ensure_future(self.resolve_field(node, name))
            for node in nodes
            for name in (
                field_names if field_names is not None else self.registry.fields_for(node.type_name)
            )
        ]
        if not tasks:
            return

        try:
            results = await asyncio.gather(*tasks, return_exceptions=True)
        except BaseException:
            for task in tasks:
                task.cancel()
            self.cancel_in_flight()
            raise

        for result in results:
            if isinstance(result, BaseException):
                self.cancel_in_flight()
                raise result

        logger.info(f"Resolved {len(tasks)} fields ({self.invocations} resolver invocations)")

    def cancel_in_flight(self) -> None:
        """Cancel every running async resolution."""
        for task in list(self._in_flight.values()):
            task.cancel()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    # ═══════════════════════════════════════════════════════════
    # INVOCATION
    # ═══════════════════════════════════════════════════════════

    def _invoke_sync(self, resolver: FieldResolver, node: Node) -> Any:
        self.invocations += 1
        try:
            value = resolver.fn(node, self.context)
        except BuildCancelled:
            raise
        except Exception as e:
            return self._failed(resolver, node, f"raised {type(e).__name__}: {e}")

        if inspect.isawaitable(value):
            if inspect.iscoroutine(value):
                value.close()
            return self._failed(resolver, node, "returned an awaitable from a synchronous resolver")

        return self._check_shape(resolver, node, value)

    async def _run_async(self, resolver: FieldResolver, node: Node) -> Any:
        async with self._semaphore:
            self.context.token.raise_if_cancelled()
            self.invocations += 1
            try:
                value = await self.context.token.guard(resolver.fn(node, self.context))
            except BuildCancelled:
                raise
            except Exception as e:
                value = self._failed(resolver, node, f"raised {type(e).__name__}: {e}")
            else:
                value = self._check_shape(resolver, node, value)

        node.memoize(resolver.field_name, value)
        return value

    def _check_shape(self, resolver: FieldResolver, node: Node, value: Any) -> Any:
        if value is None or resolver.returns is None:
            return value
        if isinstance(value, resolver.returns):
            return value
        return self._failed(
            resolver, node, f"returned {type(value).__name__}, expected {resolver.returns}"
        )

    def _failed(self, resolver: FieldResolver, node: Node, reason: str) -> None:
        self.context.reporter.record(
            ResolverError(
                f"Resolver {resolver.type_name}.{resolver.field_name} failed for node {node.id}: {reason}",
                context={
                    "node_id": node.id,
                    "type": resolver.type_name,
                    "field": resolver.field_name,
                },
            )
        )
        return None
