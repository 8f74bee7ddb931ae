"""Errors raised by the catalog, the load pipeline and the session."""


class CatalogError(Exception):
    """Base error for this package."""


class MalformedLineError(CatalogError):
    """Raised when an input line has fewer than two comma-separated fields."""


class CatalogNameError(CatalogError):
    """Raised when a requested file name does not match the expected catalog."""


class CatalogNotLoadedError(CatalogError):
    """Raised when a query arrives before any catalog has been loaded."""


class CatalogFileError(CatalogError):
    """Raised when the catalog file exists but cannot be read or decoded."""
