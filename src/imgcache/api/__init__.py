"""HTTP boundary: routers, schemas, dependencies and error handlers."""

from imgcache.api.exception_handlers import register_exception_handlers
from imgcache.api.routers import api_router

__all__ = ["api_router", "register_exception_handlers"]
