"""
Configuration for PageGraph.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from pagegraph.utils.exceptions import ConfigurationError


ENV_PREFIX = "PAGEGRAPH_"


def _get_env(name: str, default: Any = None) -> Any:
    """
    Read PAGEGRAPH_<name>, converted to the type of default; empty means unset.

    Raises:
        ConfigurationError: If a numeric variable does not parse
    """
    value = os.getenv(ENV_PREFIX + name)
    if value is None or value == "":
        return default
    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes")
    try:
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
    except ValueError as e:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name} must be a {type(default).__name__}, got '{value}'",
            context={"variable": ENV_PREFIX + name, "value": value},
        ) from e
    return value


def _invalid(error: ValidationError, source: str) -> ConfigurationError:
    fields = [".".join(str(part) for part in problem["loc"]) for problem in error.errors()]
    return ConfigurationError(
        f"Invalid configuration from {source}: {', '.join(fields)}",
        context={"source": source, "fields": fields},
    )


def _read_yaml(yaml_path: str | Path) -> dict[str, Any]:
    with open(yaml_path) as f:
        return yaml.safe_load(f) or {}


class BuildConfig(BaseModel):
    """Build pipeline configuration."""

    concurrency_limit: int = Field(default=4, ge=1)


class FetcherConfig(BaseModel):
    """Remote asset fetcher configuration."""

    timeout: float = 30.0
    user_agent: str = "PageGraph/0.1"
    follow_redirects: bool = True
    asset_dir: str = ".cache/assets"


class CacheConfig(BaseModel):
    """Asset cache store configuration."""

    backend: str = "memory"  # memory, sqlite
    db_path: str = ".cache/asset_cache.db"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True
    module_levels: dict[str, str] = Field(default_factory=dict)  # e.g. {"pagegraph.core.assets": "DEBUG"}


class NavItem(BaseModel):
    """Site navigation entry."""

    label: str
    path: str


class SiteConfig(BaseModel):
    """Site metadata handed to the rendering layer."""

    title: str = "My Book Club"
    nav_items: list[NavItem] = Field(
        default_factory=lambda: [
            NavItem(label="Books", path="/books"),
            NavItem(label="Authors", path="/authors"),
        ]
    )


class Config(BaseModel):
    """Main configuration."""

    build: BuildConfig = Field(default_factory=BuildConfig)
    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Raises:
            ConfigurationError: If a variable is malformed or out of range

        Environment variables:
            PAGEGRAPH_CONCURRENCY_LIMIT: Max concurrent async resolvers
            PAGEGRAPH_FETCH_TIMEOUT: HTTP timeout in seconds
            PAGEGRAPH_USER_AGENT: HTTP User-Agent
            PAGEGRAPH_FOLLOW_REDIRECTS: Follow HTTP redirects
            PAGEGRAPH_ASSET_DIR: Directory for downloaded assets
            PAGEGRAPH_CACHE_BACKEND: Asset cache backend (memory, sqlite)
            PAGEGRAPH_CACHE_DB_PATH: SQLite asset cache path
            PAGEGRAPH_LOG_LEVEL: Log level
            PAGEGRAPH_LOG_TO_FILE: Enable file logging
            PAGEGRAPH_LOG_DIR: Log directory
            PAGEGRAPH_SITE_TITLE: Site title
        """
        # Load .env file if provided or exists
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        try:
            return cls(
                build=BuildConfig(
                    concurrency_limit=_get_env("CONCURRENCY_LIMIT", 4),
                ),
                fetcher=FetcherConfig(
                    timeout=_get_env("FETCH_TIMEOUT", 30.0),
                    user_agent=_get_env("USER_AGENT", "PageGraph/0.1"),
                    follow_redirects=_get_env("FOLLOW_REDIRECTS", True),
                    asset_dir=_get_env("ASSET_DIR", ".cache/assets"),
                ),
                cache=CacheConfig(
                    backend=_get_env("CACHE_BACKEND", "memory"),
                    db_path=_get_env("CACHE_DB_PATH", ".cache/asset_cache.db"),
                ),
                logging=LoggingConfig(
                    level=_get_env("LOG_LEVEL", "INFO"),
                    log_to_file=_get_env("LOG_TO_FILE", False),
                    log_dir=_get_env("LOG_DIR", "logs"),
                    file_rotation=_get_env("LOG_FILE_ROTATION", "10 MB"),
                    file_retention=_get_env("LOG_FILE_RETENTION", "7 days"),
                    compression=_get_env("LOG_COMPRESSION", "zip"),
                    serialize=_get_env("LOG_SERIALIZE", True),
                ),
                site=SiteConfig(
                    title=_get_env("SITE_TITLE", "My Book Club"),
                ),
            )
        except ValidationError as e:
            raise _invalid(e, "environment") from e

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
            ConfigurationError: If a value is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            return cls(**_read_yaml(yaml_path))
        except ValidationError as e:
            raise _invalid(e, str(yaml_path)) from e

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance

        Raises:
            ConfigurationError: If the merged values are invalid
        """
        final_dict = _read_yaml(yaml_path) if yaml_path and Path(yaml_path).exists() else {}
        env_config = cls.from_env(env_file=env_file)

        # Apply env overrides field by field (non-default values only)
        default = cls()
        for section in ("build", "fetcher", "cache", "logging", "site"):
            defaults = getattr(default, section).model_dump()
            overrides = {
                key: value
                for key, value in getattr(env_config, section).model_dump().items()
                if value != defaults[key]
            }
            if overrides:
                final_dict[section] = {**(final_dict.get(section) or {}), **overrides}

        if not final_dict:
            return env_config
        try:
            return cls(**final_dict)
        except ValidationError as e:
            raise _invalid(e, str(yaml_path or "environment")) from e

