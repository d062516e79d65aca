"""Middleware for observability: request/response logging."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from imgcache.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

# Probes hit these every few seconds - logging them drowns everything else
QUIET_PATH_PREFIXES = ("/health", "/metrics")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per HTTP request and echo the correlation ID."""

    def __init__(self, app: ASGIApp, log_request_body: bool = False) -> None:
        """Initialize middleware.

        Args:
            app: ASGI application
            log_request_body: Whether to log request body (transform
                descriptors are tiny, but keep it off in production)
        """
        super().__init__(app)
        self.log_request_body = log_request_body

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # Correlation ID from header or a fresh one - BEFORE anything logs
        correlation_id = request.headers.get("X-Correlation-ID")
        set_correlation_id(correlation_id)

        method = request.method
        path = request.url.path
        quiet = path.startswith(QUIET_PATH_PREFIXES)

        if self.log_request_body and not quiet:
            body = await request.body()
            logger.debug(
                "Request body for %s %s: %r",
                method,
                path,
                body[:256],
                extra={"method": method, "path": path},
            )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.exception(
                f"Request failed: {method} {path}",
                extra={
                    "method": method,
                    "path": path,
                    "duration_seconds": duration,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        if not quiet:
            status_emoji = "✓" if response.status_code < 400 else "✗"
            logger.info(
                f"{status_emoji} {method} {path} → {response.status_code} ({duration_ms:.0f}ms)",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": int(duration_ms),
                    "client_ip": request.client.host if request.client else "unknown",
                },
            )

        response.headers["X-Correlation-ID"] = get_correlation_id()
        return response
