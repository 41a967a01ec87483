"""
Data models for PageGraph.

Core models:
- Node: Typed, identity-bearing record with content digest
- TypeDefinition, FieldSpec, LinkSpec: Schema and relation declarations
- AssetRef, AssetCacheEntry, AssetStatus: Remote asset cache
- PageDescriptor, PageRoute, StaticPage: Page generation
- BuildWarning, BuildResult: Build outcome
"""

from pagegraph.models.asset import AssetCacheEntry, AssetRef, AssetStatus
from pagegraph.models.node import Node
from pagegraph.models.page import PageDescriptor, PageRoute, StaticPage
from pagegraph.models.report import BuildResult, BuildWarning
from pagegraph.models.type_def import (
    Cardinality,
    FieldSpec,
    FieldType,
    LinkSpec,
    TypeDefinition,
)

__all__ = [
    # Graph models
    "Node",
    "TypeDefinition",
    "FieldSpec",
    "FieldType",
    "LinkSpec",
    "Cardinality",
    # Asset models
    "AssetRef",
    "AssetCacheEntry",
    "AssetStatus",
    # Page models
    "PageDescriptor",
    "PageRoute",
    "StaticPage",
    # Build outcome
    "BuildWarning",
    "BuildResult",
]
