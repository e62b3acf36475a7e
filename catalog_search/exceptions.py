"""Exception hierarchy for catalog-search."""

from pathlib import Path


class CatalogSearchError(Exception):
    """Base exception for all catalog-search errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all catalog-search errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(CatalogSearchError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Search Errors
class SearchError(CatalogSearchError):
    """Search-related errors."""

    pass


class NotARangeError(SearchError):
    """Range bounds were requested from a term that is not a range."""

    def __init__(self, term: object) -> None:
        self.term = term
        super().__init__(f"Not a range query: {term}")


# Database Errors
class DatabaseError(CatalogSearchError):
    """Database-related errors."""

    pass
