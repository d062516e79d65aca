# Hey future me - probes for Docker/Kubernetes:
# - /health/live   → process is up (no checks at all)
# - /health/ready  → cache directory exists and is writable, worker pool running
#
# Docker HEALTHCHECK: curl -f http://localhost:8000/health/live || exit 1
"""Health check endpoints for Docker/Kubernetes probes."""

import asyncio
import os
from datetime import UTC, datetime

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

router = APIRouter(prefix="/health", tags=["Health"])


class LivenessStatus(BaseModel):
    """Simple liveness probe response."""

    status: str = Field(description="alive")
    timestamp: str = Field(description="ISO timestamp")


class ReadinessStatus(BaseModel):
    """Readiness probe response."""

    status: str = Field(description="ready or not_ready")
    timestamp: str = Field(description="ISO timestamp")
    cache_dir: bool = Field(description="Cache directory exists and is writable")
    workers: bool = Field(description="Processing pool accepts jobs")


@router.get("/live", response_model=LivenessStatus)
async def liveness_probe() -> LivenessStatus:
    """Returns 200 while the process is running. No dependency checks."""
    return LivenessStatus(status="alive", timestamp=datetime.now(UTC).isoformat())


@router.get("/ready", response_model=ReadinessStatus)
async def readiness_probe(request: Request) -> JSONResponse:
    """Returns 200 if we can take transform requests, 503 otherwise."""
    cache_ok = False
    cache_store = getattr(request.app.state, "cache_store", None)
    if cache_store is not None:
        root = cache_store.root
        cache_ok = await asyncio.to_thread(
            lambda: root.is_dir() and os.access(root, os.W_OK)
        )

    pool = getattr(request.app.state, "processing_pool", None)
    workers_ok = pool is not None and pool.is_running

    is_ready = cache_ok and workers_ok
    response = ReadinessStatus(
        status="ready" if is_ready else "not_ready",
        timestamp=datetime.now(UTC).isoformat(),
        cache_dir=cache_ok,
        workers=workers_ok,
    )
    status_code = status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=status_code)
