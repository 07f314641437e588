# bookstore/main.py
import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .catalog import CatalogStore, books_router, reviews_router
from .catalog.errors import CatalogError, InternalError
from .models import ErrorResponse, ServiceInfo
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API over the documents named in ``settings``."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Book catalogue and customer reviews served from two "
            "JSON documents."
        ),
        version=settings.version,
    )
    app.state.settings = settings
    app.state.store = CatalogStore.from_settings(settings)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(404, "Route not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(InternalError.status_code, InternalError.default_message)

    # Service descriptor
    @app.get("/", response_model=ServiceInfo)
    def service_info():
        return ServiceInfo(message=f"Welcome to {settings.app_name}", version=settings.version)

    app.include_router(books_router)
    app.include_router(reviews_router)
    return app


app = create_app()
