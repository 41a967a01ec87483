"""
Custom exception hierarchy for PageGraph.

Fatal errors stop the current build phase and reach the caller.
Recoverable errors subclass RecoverableError; they are recorded as build
warnings and never interrupt the pipeline.
All exceptions inherit from PageGraphError for easy catching.
"""


class PageGraphError(Exception):
    """
    Base exception for all PageGraph errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize PageGraph error.
        Args:
            message: Error message
            context: Optional context dictionary with offending ids, paths, etc.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigurationError(PageGraphError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class StoreError(PageGraphError):
    """
    Base exception for store operations.
    Used for errors related to node and asset storage.
    """

    pass


class IdentityConflict(StoreError):
    """
    Raised when a node is upserted with an existing id but a different digest.
    """

    pass


class ValidationError(PageGraphError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class SchemaViolation(ValidationError):
    """
    Raised when an ingested record does not satisfy its type's field schema.
    """

    pass


class RegistryError(PageGraphError):
    """
    Base exception for type and resolver registration errors.
    """

    pass


class DuplicateType(RegistryError):
    """Raised when a type name is registered twice."""

    pass


class UnknownLinkTarget(RegistryError):
    """
    Raised when a link spec references an unregistered type or field.
    """

    pass


class DuplicateResolver(RegistryError):
    """Raised when a (type, field) pair already has a resolver."""

    pass


class ResolverNotFound(RegistryError):
    """Raised when a field is requested that no resolver is registered for."""

    pass


class GenerationError(PageGraphError):
    """
    Base exception for page generation errors.
    """

    pass


class PathCollision(GenerationError):
    """
    Raised when two source entities map to the same page path.
    """

    pass


class BuildCancelled(PageGraphError):
    """
    Raised when the build is aborted through its cancellation token.
    """

    pass


class RecoverableError(PageGraphError):
    """
    Base class for errors that are collected as warnings.
    """

    pass


class LinkAmbiguity(RecoverableError):
    """
    A one-cardinality link matched more than one node.
    """

    pass


class ResolverError(RecoverableError):
    """
    A field resolver raised, rejected or returned an invalid shape.
    """

    pass


class FetchError(RecoverableError):
    """
    A network retrieval failed or returned a non-success status.
    """

    pass
