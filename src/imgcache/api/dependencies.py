"""Dependency injection for API endpoints."""

from fastapi import Request

from imgcache.application.services.transform import TransformService
from imgcache.config import Settings, get_settings
from imgcache.domain.exceptions import ConfigurationError
from imgcache.infrastructure.storage.cache_store import CacheStore


# Hey future me, the lifespan builds the service graph ONCE and parks it on
# app.state. These helpers just fetch it. A missing attribute means the app was
# started without its lifespan (e.g. a bare TestClient without `with`).
def get_transform_service(request: Request) -> TransformService:
    service = getattr(request.app.state, "transform_service", None)
    if service is None:
        raise ConfigurationError("Transform service not initialized")
    return service


def get_cache_store(request: Request) -> CacheStore:
    store = getattr(request.app.state, "cache_store", None)
    if store is None:
        raise ConfigurationError("Cache store not initialized")
    return store


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with (falls back to the global ones)."""
    return getattr(request.app.state, "settings", None) or get_settings()
