"""Error types raised by the catalog core."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for every error the catalog core surfaces to callers."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidIsbn(CatalogError, ValueError):
    """Raw ISBN input could not be normalized to 10-13 digits."""

    def __init__(self, raw: str, message: str = "ISBN must be 10-13 digits") -> None:
        super().__init__(message)
        self.raw = raw


class NotFound(CatalogError):
    """Lookup or fetch target does not exist."""


class TransportFailure(CatalogError):
    """Network, protocol or non-success response from a remote collaborator."""


class ValidationFailure(CatalogError):
    """A record violates one of the catalog invariants."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class Forbidden(CatalogError):
    """Caller's session lacks the role the operation requires."""
