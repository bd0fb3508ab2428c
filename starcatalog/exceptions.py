"""
STARCATALOG Custom Exceptions

Provides the domain-specific exception hierarchy for the star catalog query
engine. Catalog backends raise these instead of generic Python exceptions so
that callers can tell a missing star from a broken catalog file.

Exception Hierarchy:
    StarCatalogError (base)
    ├── ConfigurationError
    └── CatalogError
        ├── CatalogNotFoundError
        │   ├── StarNotFoundError
        │   └── ObjectNotFoundError
        ├── CatalogParseError
        ├── CatalogIOError
        ├── CatalogRangeError
        └── CatalogLogicError
"""

from typing import Any, Optional


class StarCatalogError(Exception):
    """Base exception for all STARCATALOG errors.

    All STARCATALOG-specific exceptions inherit from this class, allowing
    callers to catch all catalog errors with a single except clause.

    Attributes:
        message: Human-readable error description
        details: Optional dict with additional error context
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(StarCatalogError):
    """Error in configuration file or settings.

    Raised when configuration validation fails, the configuration file is
    missing, or it does not contain valid YAML.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_file: Optional[str] = None,
    ) -> None:
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_file:
            details["config_file"] = config_file
        super().__init__(message, details)
        self.config_key = config_key
        self.config_file = config_file


# =============================================================================
# Catalog Errors
# =============================================================================

class CatalogError(StarCatalogError):
    """Base class for catalog-related errors.

    Every catalog error may carry the name of the catalog that raised it.
    """

    def __init__(
        self,
        message: str,
        catalog: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        details = {k: v for k, v in kwargs.items() if v is not None}
        if catalog:
            details["catalog"] = catalog
        super().__init__(message, details)
        self.catalog = catalog


class CatalogNotFoundError(CatalogError):
    """A name or identifier is not known to a catalog."""
    pass


class StarNotFoundError(CatalogNotFoundError):
    """Star not found in a star catalog.

    Raised when a name is not recognized by a catalog, or when it does not
    follow the naming grammar of that catalog.
    """

    def __init__(
        self,
        message: str,
        star_name: Optional[str] = None,
        catalog: Optional[str] = None,
    ) -> None:
        super().__init__(message, catalog, star_name=star_name)
        self.star_name = star_name


class ObjectNotFoundError(CatalogNotFoundError):
    """Deep sky object not found in catalog."""

    def __init__(
        self,
        message: str,
        object_name: Optional[str] = None,
        catalog: Optional[str] = None,
    ) -> None:
        super().__init__(message, catalog, object_name=object_name)
        self.object_name = object_name


class CatalogParseError(CatalogError, ValueError):
    """A fixed-width or binary record could not be parsed.

    Raised for numeric fields that do not parse, records without a position,
    or records of the wrong length.
    """

    def __init__(
        self,
        message: str,
        catalog: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[str] = None,
    ) -> None:
        super().__init__(message, catalog, field=field, value=value)
        self.field = field
        self.value = value


class CatalogIOError(CatalogError, OSError):
    """A catalog file or database cannot be opened or read."""

    def __init__(
        self,
        message: str,
        catalog: Optional[str] = None,
        path: Optional[str] = None,
    ) -> None:
        super().__init__(message, catalog, path=str(path) if path else None)
        self.path = path


class CatalogRangeError(CatalogError, IndexError):
    """An index is out of range, or an iterator was read past its end."""
    pass


class CatalogLogicError(CatalogError):
    """Programmer error: incompatible iterators, unsupported operation."""
    pass


# =============================================================================
# Convenience aliases
# =============================================================================

Error = StarCatalogError
NotFound = CatalogNotFoundError
