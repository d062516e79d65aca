"""Custom exception handlers for the FastAPI application.

Every error leaves the service in the same shape:

    {"status": "ERROR", "reason": "<human readable reason>"}

Domain exceptions carry both the reason text and the HTTP status (see
domain/exceptions), so one handler covers the whole taxonomy. Anything outside
it ends up as a 500 in the same shape.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from imgcache.domain.exceptions import (
    ImageCacheError,
    ProcessingError,
    ValidationException,
)

logger = logging.getLogger(__name__)


def error_response(reason: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "ERROR", "reason": reason},
    )


# Hey future me, this MUST run during app setup (create_app does it) - handlers
# registered after startup are ignored. Without it domain exceptions would
# leak out as bare 500s with Starlette's plain-text body.
def register_exception_handlers(app: FastAPI) -> None:
    """Register the JSON error handlers.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ImageCacheError)
    async def image_cache_error_handler(
        request: Request, exc: ImageCacheError
    ) -> JSONResponse:
        """Map any domain exception to its status code and reason."""
        # Client mistakes are routine, server-side failures are not
        log = logger.info if isinstance(exc, ValidationException) else logger.warning
        log(
            "%s at %s: %s",
            type(exc).__name__,
            request.url.path,
            exc.reason,
            extra={
                "path": request.url.path,
                "error": exc.reason,
                "category": exc.category,
                "status_code": exc.http_status,
            },
        )
        return error_response(exc.reason, exc.http_status)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Last resort: anything that escaped the domain taxonomy is a 500."""
        logger.error(
            "Unhandled %s at %s",
            type(exc).__name__,
            request.url.path,
            exc_info=exc,
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
        error = ProcessingError(str(exc))
        return error_response(error.reason, error.http_status)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Routing errors (404/405) in the same shape as domain errors."""
        logger.debug(
            "HTTP %d at %s: %s",
            exc.status_code,
            request.url.path,
            exc.detail,
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
        response = error_response(str(exc.detail), exc.status_code)
        if exc.headers:
            response.headers.update(exc.headers)
        return response
