"""Error taxonomy shared by the catalog services and the HTTP layer."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for errors surfaced by catalog operations."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(CatalogError):
    """Requested product is absent from every source consulted."""

    status_code = 404
    error = "Not Found"


class UpstreamUnavailableError(CatalogError):
    """The external catalog failed for a reason other than a clean 404."""

    status_code = 503
    error = "Service Unavailable"


class InputValidationError(CatalogError):
    status_code = 400
    error = "Bad Request"


class PersistenceError(CatalogError):
    """A Local Store write failed unexpectedly."""

    status_code = 500
    error = "Internal Server Error"
