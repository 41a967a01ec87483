"""Field resolver engine for PageGraph."""

from pagegraph.core.resolvers.context import ResolveContext
from pagegraph.core.resolvers.engine import FieldResolverEngine
from pagegraph.core.resolvers.registry import FieldResolver, ResolverRegistry

__all__ = [
    "FieldResolver",
    "FieldResolverEngine",
    "ResolveContext",
    "ResolverRegistry",
]
