"""Observability: logging, request middleware and metrics."""

from imgcache.infrastructure.observability.logger_template import log_slow_operation
from imgcache.infrastructure.observability.logging import (
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)
from imgcache.infrastructure.observability.metrics import (
    TransformMetrics,
    get_transform_metrics,
    reset_transform_metrics,
)
from imgcache.infrastructure.observability.middleware import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
    "TransformMetrics",
    "configure_logging",
    "get_correlation_id",
    "get_transform_metrics",
    "log_slow_operation",
    "reset_transform_metrics",
    "set_correlation_id",
]
