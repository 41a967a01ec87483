"""
Logging configuration using Loguru.

Every module logs through get_logger(__name__). Build warnings carry their
context dict as a bound "context" extra, which the JSON file sink keeps.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} - {message}"


def _level_filter(level: str, module_levels: dict[str, str]) -> tuple[int, dict[str, str]]:
    """Sink threshold plus per-module overrides, keyed by module prefix."""
    levels = {"": level, **module_levels}
    threshold = min(logger.level(name.upper()).no for name in levels.values())
    return threshold, {module: name.upper() for module, name in levels.items()}


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
    module_levels: dict[str, str] | None = None,
) -> None:
    """
    Configure the console sink and an optional rotating JSON file sink.

    Args:
        level: Default minimum level
        log_to_file: Also write to log_dir
        log_dir: Directory for log files
        file_rotation: Loguru rotation policy
        file_retention: Loguru retention policy
        compression: Archive format for rotated files
        serialize: Write the file sink as JSON lines
        module_levels: Per-module minimum levels, e.g.
            {"pagegraph.core.assets": "DEBUG", "pagegraph.core.node_store": "WARNING"}
    """
    logger.remove()
    logger.configure(extra={"module": "pagegraph"})

    threshold, module_filter = _level_filter(level, module_levels or {})

    logger.add(
        sys.stderr,
        level=threshold,
        filter=module_filter,
        format=CONSOLE_FORMAT,
        colorize=True,
        serialize=False,
    )

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "pagegraph_{time:YYYY-MM-DD}.log",
            level=threshold,
            filter=module_filter,
            format=FILE_FORMAT,
            rotation=file_rotation,
            retention=file_retention,
            compression=compression,
            serialize=serialize,
            enqueue=True,
        )


def get_logger(name: str):
    """Get a logger instance for a module."""
    return logger.bind(module=name)
