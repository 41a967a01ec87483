"""
Field resolver dispatch table.

Resolvers are registered per (type_name, field_name) before a build starts.
Each is a function of (node, ctx) and is either synchronous and pure, or a
coroutine function that may reach the network through ctx.
"""

import inspect
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

from pagegraph.utils.exceptions import DuplicateResolver, ResolverNotFound


class FieldResolver(BaseModel):
    """A registered resolver."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    type_name: str
    field_name: str
    fn: Callable[..., Any]
    is_async: bool
    returns: Any = None  # type or tuple of types the value must be an instance of


def _is_coroutine_function(fn: Callable[..., Any]) -> bool:
    if inspect.iscoroutinefunction(fn):
        return True
    call = getattr(fn, "__call__", None)
    return inspect.iscoroutinefunction(call)


class ResolverRegistry:
    """Static-at-build-time mapping (type_name, field_name) -> FieldResolver."""

    def __init__(self):
        self._resolvers: dict[tuple[str, str], FieldResolver] = {}

    def register(
        self,
        type_name: str,
        field_name: str,
        fn: Callable[..., Any],
        returns: Any = None,
    ) -> FieldResolver:
        """
        Register a resolver.

        Args:
            type_name: Type the field belongs to
            field_name: Computed field name
            fn: fn(node, ctx), sync or async
            returns: Optional type (or tuple) the result must match; None is always allowed

        Returns:
            The registered FieldResolver

        Raises:
            DuplicateResolver: If the pair already has a resolver
        """
        key = (type_name, field_name)
        if key in self._resolvers:
            raise DuplicateResolver(
                f"Resolver for '{type_name}.{field_name}' is already registered",
                context={"type": type_name, "field": field_name},
            )

        resolver = FieldResolver(
            type_name=type_name,
            field_name=field_name,
            fn=fn,
            is_async=_is_coroutine_function(fn),
            returns=returns,
        )
        self._resolvers[key] = resolver
        return resolver

    def resolver(self, type_name: str, field_name: str, returns: Any = None):
        """Decorator form of register()."""

        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            self.register(type_name, field_name, fn, returns=returns)
            return fn

        return decorator

    def get(self, type_name: str, field_name: str) -> FieldResolver:
        """
        Look up a resolver.

        Raises:
            ResolverNotFound: If nothing is registered for the pair
        """
        resolver = self._resolvers.get((type_name, field_name))
        if resolver is None:
            raise ResolverNotFound(
                f"No resolver registered for '{type_name}.{field_name}'",
                context={"type": type_name, "field": field_name},
            )
        return resolver

    def fields_for(self, type_name: str) -> list[str]:
        """Resolver-backed fields of a type, in registration order."""
        return [field for (owner, field) in self._resolvers if owner == type_name]

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._resolvers

    def __len__(self) -> int:
        return len(self._resolvers)
