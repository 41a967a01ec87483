"""Collects recoverable errors as build warnings."""

from pagegraph.models.report import BuildWarning
from pagegraph.utils.exceptions import RecoverableError
from pagegraph.utils.logger import get_logger

logger = get_logger(__name__)


class Reporter:
    """
    Per-build warning sink.

    Recoverable errors are logged at WARNING level and kept in order so the
    build invoker receives them with the final page set.
    """

    def __init__(self):
        self._warnings: list[BuildWarning] = []

    def record(self, error: RecoverableError) -> BuildWarning:
        """
        Record a recoverable error.

        Args:
            error: LinkAmbiguity, ResolverError or FetchError instance

        Returns:
            The stored warning
        """
        warning = BuildWarning(
            kind=type(error).__name__,
            message=error.message,
            context=dict(error.context),
        )
        self._warnings.append(warning)
        logger.bind(context=warning.context).warning(f"{warning.kind}: {warning.message}")
        return warning

    @property
    def warnings(self) -> list[BuildWarning]:
        return list(self._warnings)

    def __len__(self) -> int:
        return len(self._warnings)
