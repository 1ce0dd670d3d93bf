"""
Middleware components for the access backend.

Request logging with a per-request id bound into the structlog context,
and the standard security response headers.
"""

from time import perf_counter
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from smartops.monitoring import bind_request_id, clear_context, get_logger
from smartops.utils.helpers import host

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request summary and timing information."""

        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        bind_request_id(request_id)
        start_time = perf_counter()
        logger.info("Request", method=request.method, path=request.url.path, ip=host(request))

        try:
            response = await call_next(request)
            duration = perf_counter() - start_time
            logger.info(
                "Response",
                status=response.status_code,
                method=request.method,
                path=request.url.path,
                duration_s=round(duration, 3),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_context()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""

        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
