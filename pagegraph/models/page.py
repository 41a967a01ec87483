"""Page generation models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PageDescriptor(BaseModel):
    """Output unit mapping a path to a template and its render context."""

    model_config = ConfigDict(frozen=True)

    path: str
    template_id: str
    context: dict[str, Any] = Field(default_factory=dict)
    source_id: str | None = Field(default=None, description="Node the page was derived from")


class PageRoute(BaseModel):
    """
    How nodes of one type become pages.

    The grouping segment comes from a resolved link (group_link, titled by the
    target's group_title_field) or from a plain attribute (group_field).
    """

    type_name: str
    category: str
    template_id: str
    title_field: str = "name"
    group_field: str | None = None
    group_link: str | None = None
    group_title_field: str = "name"


class StaticPage(BaseModel):
    """A page not derived from any node."""

    path: str
    template_id: str
    context: dict[str, Any] = Field(default_factory=dict)
