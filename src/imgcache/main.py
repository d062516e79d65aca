"""FastAPI application entry point.

Run with:
    uvicorn imgcache.main:app --host 0.0.0.0 --port 8000
"""

from fastapi import FastAPI

from imgcache.api import api_router, register_exception_handlers
from imgcache.config import Settings
from imgcache.domain.ports.downloader import ImageDownloader
from imgcache.infrastructure.lifecycle import lifespan
from imgcache.infrastructure.observability import RequestLoggingMiddleware


def create_app(
    settings: Settings | None = None,
    downloader: ImageDownloader | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use instead of the environment-loaded ones
        downloader: Downloader to use instead of the HTTP one (tests)
    """
    app = FastAPI(
        title="imgcache",
        description="On-demand image transformation cache",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.downloader = downloader

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)

    return app


app = create_app()
