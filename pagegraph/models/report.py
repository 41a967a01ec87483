"""Build outcome models: recoverable warnings and the final result."""

from typing import Any

from pydantic import BaseModel, Field

from pagegraph.models.page import PageDescriptor


class BuildWarning(BaseModel):
    """A recoverable error recorded during a build."""

    kind: str = Field(..., description="LinkAmbiguity, ResolverError or FetchError")
    message: str
    context: dict[str, Any] = Field(default_factory=dict)


class BuildResult(BaseModel):
    """Everything a build hands to the rendering collaborator."""

    pages: list[PageDescriptor] = Field(default_factory=list)
    warnings: list[BuildWarning] = Field(default_factory=list)
    node_count: int = 0
    nodes: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Attributes and resolved fields of every paged node, by id",
    )
    site: dict[str, Any] = Field(default_factory=dict)

    @property
    def paths(self) -> list[str]:
        return [page.path for page in self.pages]

    def warnings_of(self, kind: str) -> list[BuildWarning]:
        """Filter warnings by kind."""
        return [warning for warning in self.warnings if warning.kind == kind]
