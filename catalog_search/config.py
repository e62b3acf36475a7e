"""Configuration management for catalog-search."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from catalog_search.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)

DEFAULT_MAX_QUERY_LENGTH = 500


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "catalog-search" / "config.toml"


def get_default_database_url() -> str:
    """Get the default catalog database URL."""
    return f"sqlite:///{Path.cwd() / 'catalog.db'}"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        database_url: SQLAlchemy URL of the catalog database.
        max_query_length: Longest query accepted by the validator
            (None disables the check).
        default_limit: Default maximum number of search results
            (None = unlimited).
        colored_output: Whether to use colored terminal output.
        config_path: Path where config was loaded from (None if defaults).
    """

    database_url: str = field(default_factory=get_default_database_url)
    max_query_length: int | None = DEFAULT_MAX_QUERY_LENGTH
    default_limit: int | None = None
    colored_output: bool = True
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        if self.max_query_length is not None and self.max_query_length <= 0:
            raise ConfigValidationError(
                "search.max_query_length", self.max_query_length, "must be positive"
            )

        if self.default_limit is not None and self.default_limit <= 0:
            raise ConfigValidationError(
                "search.default_limit", self.default_limit, "must be positive"
            )

        if self.database_url.startswith("sqlite:///"):
            db_path = Path(self.database_url.removeprefix("sqlite:///"))
            if str(db_path) != ":memory:" and not db_path.exists():
                warnings.append(f"Catalog database not found: {db_path}")

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        warnings.append(f"No config file found at {config_path}. Using defaults.")
        config_warnings = config.validate()
        return config, warnings + config_warnings

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _optional_int(section: dict[str, Any], key: str, name: str) -> int | None:
    value = section[key]
    # bool is an int subclass; reject it explicitly
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise ConfigValidationError(name, value, "must be an integer or null")
    return value


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [catalog] section
    catalog = data.get("catalog", {})
    if "database" in catalog:
        value = catalog["database"]
        if not isinstance(value, str):
            raise ConfigValidationError("catalog.database", value, "must be a string URL")
        config.database_url = value

    # Parse [search] section
    search = data.get("search", {})
    if "max_query_length" in search:
        config.max_query_length = _optional_int(
            search, "max_query_length", "search.max_query_length"
        )
    if "default_limit" in search:
        config.default_limit = _optional_int(search, "default_limit", "search.default_limit")

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    return config
