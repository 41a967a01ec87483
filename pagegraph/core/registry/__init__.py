"""Type registry for PageGraph."""

from pagegraph.core.registry.type_registry import TypeRegistry

__all__ = ["TypeRegistry"]
