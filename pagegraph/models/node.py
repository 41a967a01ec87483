"""
Content graph node model.

A Node is frozen once ingested. The only mutable state is the resolved-field
cache, which is append-only and is not part of identity or digest.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class Node(BaseModel):
    """
    Identity-bearing, typed record in the content graph.

    Nodes are built by TypeRegistry.build_node(), which derives the id from the
    type's natural key and the digest from the validated attributes.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable node ID derived from type and natural key")
    type_name: str = Field(..., description="Declared type name")
    attributes: Mapping[str, Any] = Field(default_factory=dict, description="Validated attributes")
    content_digest: str = Field(..., description="SHA-256 of canonical attributes")

    _resolved: dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator("attributes", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        """Attributes back the content digest, so they are exposed read-only."""
        return MappingProxyType(dict(value))

    def get(self, field_name: str, default: Any = None) -> Any:
        """Read an attribute, returning default when absent."""
        return self.attributes.get(field_name, default)

    def is_resolved(self, field_name: str) -> bool:
        """Whether a value (possibly None) has been memoized for field_name."""
        return field_name in self._resolved

    def resolved_value(self, field_name: str) -> Any:
        """Return the memoized value for field_name."""
        return self._resolved[field_name]

    def memoize(self, field_name: str, value: Any) -> None:
        """
        Attach a resolved value.

        Raises:
            ValueError: If the field was already memoized
        """
        if field_name in self._resolved:
            raise ValueError(f"Field '{field_name}' already resolved on node {self.id}")
        self._resolved[field_name] = value

    @property
    def resolved(self) -> dict[str, Any]:
        """Copy of every memoized field value."""
        return dict(self._resolved)
