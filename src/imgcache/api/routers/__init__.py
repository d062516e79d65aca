"""API routers.

Order matters: the transform route is a catch-all POST on "/{source:path}",
so it is included LAST.
"""

from fastapi import APIRouter

from imgcache.api.routers import health, metrics, transform

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(metrics.router)
api_router.include_router(transform.router)

__all__ = ["api_router"]
