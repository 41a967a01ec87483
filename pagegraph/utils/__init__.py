"""Utility modules for PageGraph."""

from pagegraph.utils.cancellation import CancellationToken
from pagegraph.utils.exceptions import (
    BuildCancelled,
    ConfigurationError,
    DuplicateResolver,
    DuplicateType,
    FetchError,
    GenerationError,
    IdentityConflict,
    LinkAmbiguity,
    PageGraphError,
    PathCollision,
    RecoverableError,
    RegistryError,
    ResolverError,
    ResolverNotFound,
    SchemaViolation,
    StoreError,
    UnknownLinkTarget,
    ValidationError,
)
from pagegraph.utils.id_generator import (
    canonical_json,
    compute_content_digest,
    generate_node_id,
    hash_locator,
)
from pagegraph.utils.logger import get_logger, setup_logging
from pagegraph.utils.reporter import Reporter

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Build helpers
    "CancellationToken",
    "Reporter",
    # Identity
    "canonical_json",
    "compute_content_digest",
    "generate_node_id",
    "hash_locator",
    # Exceptions
    "PageGraphError",
    "ConfigurationError",
    "StoreError",
    "IdentityConflict",
    "ValidationError",
    "SchemaViolation",
    "RegistryError",
    "DuplicateType",
    "UnknownLinkTarget",
    "DuplicateResolver",
    "ResolverNotFound",
    "GenerationError",
    "PathCollision",
    "BuildCancelled",
    "RecoverableError",
    "LinkAmbiguity",
    "ResolverError",
    "FetchError",
]
