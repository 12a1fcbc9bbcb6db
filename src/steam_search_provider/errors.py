"""
Exception hierarchy for the search provider.

Catalog errors for individual libraries and manifests are handled
inside the loader; the ones raised from here out are either fatal at
startup or indicate a programming error.
"""

from datetime import datetime, timezone


class SearchProviderError(Exception):
    """Base exception for search provider errors."""

    def __init__(
        self,
        message: str,
        *,
        identifier: str | None = None,
        path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.identifier = identifier
        self.path = path
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class CatalogError(SearchProviderError):
    """Raised when the Steam library cannot be read."""

    pass


class SteamNotFoundError(CatalogError):
    """Raised when no Steam installation can be located."""

    pass


class UnknownResultError(SearchProviderError, LookupError):
    """Raised when metadata is requested for an identifier not in the index."""

    pass


class ProviderRegistrationError(SearchProviderError):
    """Raised when the provider cannot be registered on the session bus."""

    pass
