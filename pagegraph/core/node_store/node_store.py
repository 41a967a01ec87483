"""
In-memory node store for a single build run.

The store is only mutated during ingestion. Field lookups go through a lazy
per-(type, field) index which is dropped whenever that type receives a new
node, so reads during resolution and generation need no locking.
"""

from collections.abc import Iterable
from typing import Any

from pagegraph.core.registry.type_registry import TypeRegistry
from pagegraph.models.node import Node
from pagegraph.utils.exceptions import IdentityConflict, StoreError
from pagegraph.utils.id_generator import canonical_json
from pagegraph.utils.logger import get_logger

logger = get_logger(__name__)


def _index_key(value: Any) -> Any:
    """Make attribute values usable as dict keys."""
    try:
        hash(value)
    except TypeError:
        return ("__json__", canonical_json(value))
    return value


class NodeStore:
    """
    Owns node lifetime for one build.

    Construct one per build and call close() when the build ends.
    """

    def __init__(self, registry: TypeRegistry):
        """
        Initialize node store.

        Args:
            registry: Type registry used to validate ingested records
        """
        self.registry = registry
        self._nodes: dict[str, Node] = {}
        self._by_type: dict[str, list[str]] = {}
        self._field_index: dict[tuple[str, str], dict[Any, list[Node]]] = {}
        self._closed = False

    # ═══════════════════════════════════════════════════════════
    # WRITES (ingestion phase only)
    # ═══════════════════════════════════════════════════════════

    def upsert(self, node: Node) -> bool:
        """
        Insert a node, or accept an identical re-ingestion.

        Args:
            node: Node to store

        Returns:
            True if the node was inserted, False for an idempotent no-op

        Raises:
            IdentityConflict: If the id exists with a different content digest
        """
        self._ensure_open()

        existing = self._nodes.get(node.id)
        if existing is not None:
            if existing.content_digest == node.content_digest:
                return False
            raise IdentityConflict(
                f"Node {node.id} of type '{node.type_name}' re-ingested with different content",
                context={
                    "node_id": node.id,
                    "type": node.type_name,
                    "existing_digest": existing.content_digest,
                    "new_digest": node.content_digest,
                },
            )

        self._nodes[node.id] = node
        self._by_type.setdefault(node.type_name, []).append(node.id)
        self._invalidate(node.type_name)
        return True

    def ingest(self, type_name: str, records: Iterable[dict[str, Any]]) -> list[Node]:
        """
        Validate and upsert every record of one type.

        Args:
            type_name: Declared type of the records
            records: Raw records in source order

        Returns:
            Nodes for the records, in input order

        Raises:
            SchemaViolation: If any record violates the type's schema
            IdentityConflict: If a record clashes with a stored node
        """
        self._ensure_open()

        # Validate the whole batch first so a bad record leaves the type untouched
        built = [self.registry.build_node(type_name, record) for record in records]

        nodes = []
        inserted = 0
        for node in built:
            if self.upsert(node):
                inserted += 1
            nodes.append(self._nodes[node.id])

        logger.info(f"Ingested {len(nodes)} {type_name} records ({inserted} new)")
        return nodes

    # ═══════════════════════════════════════════════════════════
    # READS
    # ═══════════════════════════════════════════════════════════

    def get(self, node_id: str) -> Node | None:
        """Retrieve a node by id."""
        self._ensure_open()
        return self._nodes.get(node_id)

    def query_by_type(self, type_name: str) -> list[Node]:
        """
        All nodes of a type in insertion order.

        Args:
            type_name: Type to list

        Returns:
            List of nodes (empty for unknown types)
        """
        self._ensure_open()
        return [self._nodes[node_id] for node_id in self._by_type.get(type_name, [])]

    def query_by_field(self, type_name: str, field_name: str, value: Any) -> list[Node]:
        """
        Nodes of a type whose attribute equals value.

        Args:
            type_name: Type to search
            field_name: Attribute to match
            value: Value to match

        Returns:
            Matching nodes in insertion order
        """
        self._ensure_open()

        key = (type_name, field_name)
        index = self._field_index.get(key)
        if index is None:
            index = {}
            for node in self.query_by_type(type_name):
                if field_name in node.attributes:
                    index.setdefault(_index_key(node.attributes[field_name]), []).append(node)
            self._field_index[key] = index
            logger.debug(f"Built field index {type_name}.{field_name} ({len(index)} keys)")

        return list(index.get(_index_key(value), []))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    # ═══════════════════════════════════════════════════════════
    # LIFECYCLE
    # ═══════════════════════════════════════════════════════════

    def close(self) -> None:
        """Dispose of all nodes and indexes. The store is unusable afterwards."""
        self._nodes.clear()
        self._by_type.clear()
        self._field_index.clear()
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def _invalidate(self, type_name: str) -> None:
        for key in [key for key in self._field_index if key[0] == type_name]:
            del self._field_index[key]

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreError("Node store has been closed")
