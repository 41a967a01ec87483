"""
Page generator - turns resolved nodes into page descriptors.

Paths are canonical slugs: /{category}/{entity} or, for grouped entities,
/{category}/{group}/{entity}. Every path is checked against the paths already
generated in this run; a duplicate aborts generation.
"""

import re
from collections.abc import Iterable

from pagegraph.core.links.link_resolver import LinkResolver
from pagegraph.core.node_store.node_store import NodeStore
from pagegraph.models.node import Node
from pagegraph.models.page import PageDescriptor, PageRoute, StaticPage
from pagegraph.utils.exceptions import GenerationError, PathCollision
from pagegraph.utils.logger import get_logger

logger = get_logger(__name__)

_NON_WORD = re.compile(r"\W+")


def slugify(text: str) -> str:
    """
    Normalize human-readable text into a URL slug.

    Lowercases, then replaces every maximal run of non-word characters
    with a single hyphen.

    Examples:
        >>> slugify("The Fifth Season")
        'the-fifth-season'
        >>> slugify("N. K. Jemisin")
        'n-k-jemisin'
    """
    return _NON_WORD.sub("-", text.lower())


class PageGenerator:
    """Emits the ordered, collision-free page set of one build."""

    def __init__(self, store: NodeStore, links: LinkResolver):
        """
        Initialize page generator.

        Args:
            store: Node store of the current build
            links: Link resolver used for grouping relations
        """
        self.store = store
        self.links = links

    def page_path(self, node: Node, route: PageRoute) -> str:
        """
        Compute the canonical path of a node under a route.

        Raises:
            GenerationError: If the node has no usable title
        """
        title = node.attributes.get(route.title_field)
        if title is None or title == "":
            raise GenerationError(
                f"Node {node.id} has no '{route.title_field}' to build a page path from",
                context={"node_id": node.id, "type": node.type_name, "field": route.title_field},
            )

        group = self._group_title(node, route)
        if group is None:
            return f"/{route.category}/{slugify(str(title))}"
        return f"/{route.category}/{slugify(str(group))}/{slugify(str(title))}"

    def generate(
        self,
        routes: Iterable[PageRoute],
        static_pages: Iterable[StaticPage] = (),
    ) -> list[PageDescriptor]:
        """
        Generate every page of the build.

        Static pages come first, then node pages route by route in store order.

        Args:
            routes: How each page-eligible type maps to pages
            static_pages: Pages not derived from nodes

        Returns:
            Ordered page descriptors

        Raises:
            PathCollision: If two sources produce the same path; nothing is returned
        """
        pages: list[PageDescriptor] = []
        owners: dict[str, str | None] = {}

        for static in static_pages:
            self._add(
                pages,
                owners,
                PageDescriptor(
                    path=static.path,
                    template_id=static.template_id,
                    context=dict(static.context),
                ),
            )

        for route in routes:
            for node in self.store.query_by_type(route.type_name):
                self._add(
                    pages,
                    owners,
                    PageDescriptor(
                        path=self.page_path(node, route),
                        template_id=route.template_id,
                        context={"id": node.id},
                        source_id=node.id,
                    ),
                )

        logger.info(f"Generated {len(pages)} pages")
        return pages

    def _group_title(self, node: Node, route: PageRoute):
        if route.group_link:
            target = self.links.resolve_one(node, route.group_link)
            if target is None:
                return None
            return target.attributes.get(route.group_title_field) or None
        if route.group_field:
            return node.attributes.get(route.group_field) or None
        return None

    @staticmethod
    def _add(pages: list[PageDescriptor], owners: dict[str, str | None], page: PageDescriptor) -> None:
        if page.path in owners:
            existing = owners[page.path]
            raise PathCollision(
                f"Path {page.path} produced by both {existing or 'static page'} "
                f"and {page.source_id or 'static page'}",
                context={
                    "path": page.path,
                    "source_ids": [existing, page.source_id],
                },
            )
        owners[page.path] = page.source_id
        pages.append(page)
