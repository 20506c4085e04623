"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version as get_version
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todo.config.settings import get_settings
from todo.core.exceptions import APIError
from todo.core.logging import setup_logging
from todo.core.middleware import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
    correlation_id_var,
)
from todo.db.session import get_engine, init_db
from todo.health.router import router as health_router
from todo.items.router import router as items_router

logger = logging.getLogger(__name__)


def get_app_version() -> str:
    """Get application version from package metadata."""
    try:
        return get_version("todo-list")
    except PackageNotFoundError:
        return "0.0.0-dev"


OPENAPI_TAGS = [
    {
        "name": "health",
        "description": "Health check endpoints for liveness and readiness probes",
    },
    {
        "name": "items",
        "description": "The todo list page and the form that appends to it",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown.

    A store that cannot be reached or bootstrapped aborts startup.
    """
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Application starting up")

    try:
        await init_db()
    except Exception as e:
        logger.error("Database bootstrap failed: %s", e)
        raise RuntimeError("Cannot connect to database") from e

    yield

    logger.info("Application shutting down")
    try:
        await get_engine().dispose()
        logger.info("Database engine disposed successfully")
    except Exception as e:
        logger.error("Error disposing database engine: %s", e)


def _correlation_headers(correlation_id: str) -> dict[str, str] | None:
    return {"X-Correlation-ID": correlation_id} if correlation_id else None


def _safe_input(value: Any) -> Any:
    """Keep JSON-ready inputs; name the type of anything else (uploads, ...)."""
    if value is None or isinstance(value, str | int | float | bool):
        return value
    return type(value).__name__


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle application errors with correlation ID for debugging."""
    correlation_id = correlation_id_var.get()
    logger.error(
        "%s on %s %s: %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc.message,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "error": type(exc).__name__,
            "correlation_id": correlation_id,
            **exc.details,
        },
        headers=_correlation_headers(correlation_id),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors with correlation ID."""
    correlation_id = correlation_id_var.get()
    # ctx and input may hold objects that are not JSON serializable
    errors = [
        {
            "type": error.get("type"),
            "loc": error.get("loc"),
            "msg": error.get("msg"),
            "input": _safe_input(error.get("input")),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "detail": errors,
            "error": "ValidationError",
            "correlation_id": correlation_id,
        },
        headers=_correlation_headers(correlation_id),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn any unhandled exception into a 500 for this request only."""
    correlation_id = correlation_id_var.get()
    logger.exception(
        "Unhandled exception",
        extra={"correlation_id": correlation_id, "path": request.url.path},
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error": "InternalServerError",
            "correlation_id": correlation_id,
        },
        headers=_correlation_headers(correlation_id),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # OpenAPI docs only in debug mode
    app = FastAPI(
        title=settings.app_name,
        version=get_app_version(),
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        openapi_tags=OPENAPI_TAGS,
    )

    # Order matters - last added = outermost
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.max_request_size)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RequestLoggingMiddleware, expose_timing=settings.expose_timing_header
    )
    app.add_middleware(CorrelationIdMiddleware)

    app.add_exception_handler(APIError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        validation_error_handler,  # pyright: ignore[reportArgumentType]
    )
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(health_router)
    app.include_router(items_router)

    return app


app = create_app()


def main() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "todo.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
