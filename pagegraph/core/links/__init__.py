"""Link resolution for PageGraph."""

from pagegraph.core.links.link_resolver import LinkResolver

__all__ = ["LinkResolver"]
