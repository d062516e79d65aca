"""Transform pipeline metrics in Prometheus text format.

Hey future me - this is what /metrics serves. The exposition format is written
by hand, there is no prometheus_client here.

METRICS:
- imgcache_transforms_total{status}      transformed / already_transformed
- imgcache_errors_total{error}           failures by exception class
- imgcache_cache_hits_total{tier}        tier = source | transformed
- imgcache_cache_misses_total{tier}
- imgcache_stage_duration_ms{step}       histogram per pipeline step
"""

import logging
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

from imgcache.domain.dtos import PipelineMetrics

logger = logging.getLogger(__name__)


@dataclass
class MetricDefinition:
    """Name, type and help text of one metric family."""

    name: str
    type: str  # "counter" or "histogram"
    help: str
    labels: list[str] = field(default_factory=list)


class TransformMetrics:
    """Thread-safe collector for the transform pipeline.

    Recorded from the event loop AND from worker threads, so every mutation
    goes through ``_lock``.

    Usage:
        metrics = get_transform_metrics()
        metrics.inc_transforms_total("transformed")
        metrics.observe_pipeline(result.metrics)
        text = metrics.to_prometheus_format()
    """

    # Milliseconds; encoders are the slow part, AVIF on large sources can take seconds
    DURATION_BUCKETS_MS: tuple[float, ...] = (
        1,
        5,
        10,
        25,
        50,
        100,
        250,
        500,
        1000,
        2500,
        5000,
        10000,
        float("inf"),
    )

    def __init__(self, prefix: str = "imgcache") -> None:
        self._lock = Lock()
        self._prefix = prefix

        self._definitions: dict[str, MetricDefinition] = {
            "transforms_total": MetricDefinition(
                name="transforms_total",
                type="counter",
                help="Completed transform requests by outcome",
                labels=["status"],
            ),
            "errors_total": MetricDefinition(
                name="errors_total",
                type="counter",
                help="Failed transform requests by error class",
                labels=["error"],
            ),
            "cache_hits_total": MetricDefinition(
                name="cache_hits_total",
                type="counter",
                help="Cache lookups that found an entry",
                labels=["tier"],
            ),
            "cache_misses_total": MetricDefinition(
                name="cache_misses_total",
                type="counter",
                help="Cache lookups that found nothing",
                labels=["tier"],
            ),
            "stage_duration_ms": MetricDefinition(
                name="stage_duration_ms",
                type="histogram",
                help="Pipeline step duration in milliseconds",
                labels=["step"],
            ),
        }

        self._counters: dict[str, dict[tuple[tuple[str, str], ...], float]] = {}
        self._histograms: dict[str, dict[tuple[tuple[str, str], ...], list[float]]] = {}

    @staticmethod
    def _label_key(labels: dict[str, str]) -> tuple[tuple[str, str], ...]:
        return tuple(sorted(labels.items()))

    def _inc(self, metric: str, **labels: str) -> None:
        with self._lock:
            values = self._counters.setdefault(metric, {})
            key = self._label_key(labels)
            values[key] = values.get(key, 0) + 1

    # ==========================================================================
    # COUNTERS
    # ==========================================================================

    def inc_transforms_total(self, status: str) -> None:
        self._inc("transforms_total", status=status)

    def inc_errors_total(self, error: str) -> None:
        self._inc("errors_total", error=error)

    def inc_cache_hit(self, tier: str) -> None:
        self._inc("cache_hits_total", tier=tier)

    def inc_cache_miss(self, tier: str) -> None:
        self._inc("cache_misses_total", tier=tier)

    # ==========================================================================
    # HISTOGRAMS
    # ==========================================================================

    def observe_stage_duration(self, step: str, duration_ms: float) -> None:
        with self._lock:
            values = self._histograms.setdefault("stage_duration_ms", {})
            values.setdefault(self._label_key({"step": step}), []).append(duration_ms)

    def observe_pipeline(self, pipeline: PipelineMetrics) -> None:
        """Record every stage of one finished transform."""
        for stage in pipeline.stages:
            self.observe_stage_duration(stage.step, stage.duration_ms)

    # ==========================================================================
    # EXPOSITION
    # ==========================================================================

    @staticmethod
    def _format_labels(labels: tuple[tuple[str, str], ...]) -> str:
        if not labels:
            return ""
        return "{" + ",".join(f'{k}="{v}"' for k, v in labels) + "}"

    @staticmethod
    def _format_bucket(bound: float) -> str:
        return "+Inf" if bound == float("inf") else f"{bound:g}"

    def to_prometheus_format(self) -> str:
        """Export all metrics in Prometheus text exposition format."""
        lines: list[str] = []

        with self._lock:
            for metric_name, values in self._counters.items():
                defn = self._definitions[metric_name]
                full_name = f"{self._prefix}_{defn.name}"
                lines.append(f"# HELP {full_name} {defn.help}")
                lines.append(f"# TYPE {full_name} counter")
                for label_key, value in values.items():
                    lines.append(f"{full_name}{self._format_labels(label_key)} {value}")

            for metric_name, series in self._histograms.items():
                defn = self._definitions[metric_name]
                full_name = f"{self._prefix}_{defn.name}"
                lines.append(f"# HELP {full_name} {defn.help}")
                lines.append(f"# TYPE {full_name} histogram")
                for label_key, observations in series.items():
                    for bound in self.DURATION_BUCKETS_MS:
                        count = sum(1 for v in observations if v <= bound)
                        bucket_labels = (*label_key, ("le", self._format_bucket(bound)))
                        lines.append(
                            f"{full_name}_bucket{self._format_labels(bucket_labels)} {count}"
                        )
                    label_str = self._format_labels(label_key)
                    lines.append(f"{full_name}_count{label_str} {len(observations)}")
                    lines.append(f"{full_name}_sum{label_str} {sum(observations)}")

        return "\n".join(lines) + "\n"

    def get_summary(self) -> dict[str, Any]:
        """Metrics as plain JSON for quick looks (/metrics/json)."""

        def flatten(key: tuple[tuple[str, str], ...]) -> str:
            return ",".join(f"{k}={v}" for k, v in key)

        with self._lock:
            return {
                "counters": {
                    name: {flatten(k): v for k, v in values.items()}
                    for name, values in self._counters.items()
                },
                "histograms": {
                    name: {
                        flatten(k): {"count": len(obs), "sum": sum(obs)}
                        for k, obs in series.items()
                    }
                    for name, series in self._histograms.items()
                },
            }


# =============================================================================
# GLOBAL METRICS INSTANCE
# =============================================================================

_transform_metrics: TransformMetrics | None = None


def get_transform_metrics() -> TransformMetrics:
    """Get the process-wide collector (created on first call)."""
    global _transform_metrics
    if _transform_metrics is None:
        _transform_metrics = TransformMetrics()
    return _transform_metrics


def reset_transform_metrics() -> None:
    """Drop the global collector (for testing)."""
    global _transform_metrics
    _transform_metrics = None
