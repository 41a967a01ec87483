"""Remote asset cache models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class AssetStatus(str, Enum):
    """Lifecycle of an asset cache entry."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class AssetRef(BaseModel):
    """Reference to a retrieved payload on local storage."""

    locator: str = Field(..., description="Remote URL the payload came from")
    locator_hash: str = Field(..., description="SHA-256 of the locator")
    path: str = Field(..., description="Local file holding the payload")
    content_type: str | None = None
    size: int = Field(default=0, ge=0)

    def exists(self) -> bool:
        """Whether the payload file is still present."""
        return Path(self.path).is_file()


class AssetCacheEntry(BaseModel):
    """In-process state for one locator, shared by every node requesting it."""

    locator_hash: str
    status: AssetStatus = AssetStatus.PENDING
    payload_ref: AssetRef | None = None
