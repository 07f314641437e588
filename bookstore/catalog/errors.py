"""
Error types raised by the catalogue.

Every error carries the HTTP status code it maps to and a message that
is safe to return to clients. The exception handlers registered in
``bookstore.main`` render them as ``{"success": false, "message": ...}``.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Required input is missing or malformed."""

    status_code = 400
    default_message = "Invalid request data"


class Conflict(CatalogError):
    """An entity with the same primary key already exists."""

    status_code = 400
    default_message = "Resource already exists"


class NotFound(CatalogError):
    status_code = 404
    default_message = "Resource not found"


class Unauthenticated(CatalogError):
    status_code = 401
    default_message = "Authentication required"


class PersistenceError(CatalogError):
    """Writing a collection back to disk failed."""

    status_code = 500
    default_message = "Failed to save data"


class InternalError(CatalogError):
    status_code = 500
