"""Node store for PageGraph."""

from pagegraph.core.node_store.node_store import NodeStore

__all__ = ["NodeStore"]
