"""
Catalog package for the bookstore API.

This package holds the book and review schemas, the in-memory store
that answers queries and applies additions, and the routes that expose
them under ``/api/books`` and ``/api/reviews``. Data is loaded from and
written back to two JSON documents through ``bookstore.storage``.
"""

from .router import books_router, reviews_router  # noqa: F401
from .store import CatalogStore  # noqa: F401
