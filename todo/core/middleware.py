"""Request middleware for tracing, logging, headers and size limits."""

import logging
import re
import time
from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

# Context variable for correlation ID - accessible throughout the request lifecycle
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Alphanumeric, hyphens, underscores only, max 64 chars
_CORRELATION_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")

# The list page is plain HTML with one form posting back to this origin
CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "img-src 'self' data:; "
    "form-action 'self'; "
    "frame-ancestors 'none'"
)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware that manages correlation IDs for request tracing."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Extract or generate correlation ID and add to response headers."""
        client_correlation_id = request.headers.get("X-Correlation-ID")

        # Client values end up in log lines, so only accept safe ones
        if client_correlation_id and _CORRELATION_ID_PATTERN.match(
            client_correlation_id
        ):
            correlation_id = client_correlation_id
        else:
            correlation_id = str(uuid4())

        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs request details and timing."""

    def __init__(
        self,
        app: ASGIApp,
        logger: logging.Logger | None = None,
        expose_timing: bool = True,
    ) -> None:
        super().__init__(app)
        self.logger = logger or logging.getLogger("todo.requests")
        self.expose_timing = expose_timing

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request details and processing time."""
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time_ms = (time.perf_counter() - start_time) * 1000

        self.logger.info(
            "Request completed | method=%s | path=%s | status=%d | time=%.2fms",
            request.method,
            request.url.path,
            response.status_code,
            process_time_ms,
        )

        if self.expose_timing:
            response.headers["X-Process-Time"] = f"{process_time_ms:.2f}ms"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to limit request body size."""

    def __init__(self, app: ASGIApp, max_size: int) -> None:
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Check the declared body size before processing."""
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                if int(content_length) > self.max_size:
                    return JSONResponse(
                        status_code=413,
                        content={"detail": "Request body too large"},
                    )
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"detail": "Invalid Content-Length header"},
                )
        return await call_next(request)
