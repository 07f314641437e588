# bookstore/catalog/deps.py
"""FastAPI dependencies shared by the routers."""

from typing import Optional

from fastapi import Header, Request

from .errors import Unauthenticated
from .store import CatalogStore
from ..settings import Settings


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def require_token(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> None:
    """Reject the request unless it carries ``Authorization: Bearer <token>``.

    The header is compared verbatim with the configured token; this is a
    shared-secret gate for write endpoints, not a user model.
    """
    settings = get_settings_dep(request)
    if authorization != f"Bearer {settings.api_token}":
        raise Unauthenticated("Unauthorized: valid bearer token required")
