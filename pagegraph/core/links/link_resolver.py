"""
Link resolver - computes relations between nodes on demand.

Relations are never materialized. Each call reads the source attribute and
asks the store's field index for matching targets, so the result is a pure
function of the store, which does not change after ingestion.
"""

from pagegraph.core.node_store.node_store import NodeStore
from pagegraph.core.registry.type_registry import TypeRegistry
from pagegraph.models.node import Node
from pagegraph.models.type_def import Cardinality
from pagegraph.utils.exceptions import LinkAmbiguity
from pagegraph.utils.logger import get_logger
from pagegraph.utils.reporter import Reporter

logger = get_logger(__name__)


class LinkResolver:
    """Resolves declared links against a node store."""

    def __init__(self, store: NodeStore, registry: TypeRegistry, reporter: Reporter | None = None):
        """
        Initialize link resolver.

        Args:
            store: Node store of the current build
            registry: Registry holding the link declarations
            reporter: Sink for LinkAmbiguity warnings
        """
        self.store = store
        self.registry = registry
        self.reporter = reporter or Reporter()

    def resolve(self, node: Node, link_name: str) -> Node | list[Node] | None:
        """
        Resolve a link declared on the node's type.

        Absent or null source values are a normal "no relation" case.

        Args:
            node: Source node
            link_name: Name of the link on the node's type

        Returns:
            For cardinality one: the matching node or None.
            For cardinality many: matches ordered by id (possibly empty).

        Raises:
            UnknownLinkTarget: If the link or its target is not declared
        """
        link, _ = self.registry.link_target(node.type_name, link_name)
        value = node.attributes.get(link.source_field)

        if value is None:
            return [] if link.cardinality == Cardinality.MANY else None

        matches = sorted(
            self.store.query_by_field(link.target_type, link.target_field, value),
            key=lambda target: target.id,
        )

        if link.cardinality == Cardinality.MANY:
            return matches

        if not matches:
            return None

        if len(matches) > 1:
            self.reporter.record(
                LinkAmbiguity(
                    f"Link '{node.type_name}.{link.name}' of node {node.id} matched "
                    f"{len(matches)} {link.target_type} nodes; using {matches[0].id}",
                    context={
                        "node_id": node.id,
                        "link": link.name,
                        "value": value,
                        "candidates": [target.id for target in matches],
                        "selected": matches[0].id,
                    },
                )
            )

        return matches[0]

    def resolve_one(self, node: Node, link_name: str) -> Node | None:
        """Resolve a one-cardinality link; many-links yield their first match."""
        result = self.resolve(node, link_name)
        if isinstance(result, list):
            return result[0] if result else None
        return result

