"""Metrics endpoints for Prometheus scraping.

- GET /metrics        → Prometheus text format
- GET /metrics/json   → same numbers as JSON, for debugging
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from imgcache.infrastructure.observability.metrics import get_transform_metrics

router = APIRouter(prefix="/metrics", tags=["Metrics"])


@router.get("", response_class=PlainTextResponse)
async def get_prometheus_metrics() -> str:
    """Prometheus config example:

        scrape_configs:
          - job_name: 'imgcache'
            static_configs:
              - targets: ['localhost:8000']
            metrics_path: '/metrics'
    """
    return get_transform_metrics().to_prometheus_format()


@router.get("/json")
async def get_metrics_json() -> dict[str, Any]:
    return get_transform_metrics().get_summary()
