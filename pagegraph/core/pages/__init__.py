"""Page generation for PageGraph."""

from pagegraph.core.pages.generator import PageGenerator, slugify

__all__ = ["PageGenerator", "slugify"]
