"""Tests for the transform metrics collector."""

import threading

from imgcache.domain.dtos import PipelineMetrics
from imgcache.infrastructure.observability.metrics import (
    TransformMetrics,
    get_transform_metrics,
    reset_transform_metrics,
)


class TestTransformMetrics:
    def test_counters_in_prometheus_format(self):
        metrics = TransformMetrics()
        metrics.inc_transforms_total("transformed")
        metrics.inc_transforms_total("transformed")
        metrics.inc_errors_total("DownloadError")
        metrics.inc_cache_hit("source")
        metrics.inc_cache_miss("transformed")

        text = metrics.to_prometheus_format()

        assert "# TYPE imgcache_transforms_total counter" in text
        assert 'imgcache_transforms_total{status="transformed"} 2' in text
        assert 'imgcache_errors_total{error="DownloadError"} 1' in text
        assert 'imgcache_cache_hits_total{tier="source"} 1' in text
        assert 'imgcache_cache_misses_total{tier="transformed"} 1' in text

    def test_histogram_buckets_are_cumulative(self):
        metrics = TransformMetrics()
        metrics.observe_stage_duration("Encoding", 3.0)
        metrics.observe_stage_duration("Encoding", 300.0)

        text = metrics.to_prometheus_format()

        assert "# TYPE imgcache_stage_duration_ms histogram" in text
        assert 'imgcache_stage_duration_ms_bucket{step="Encoding",le="5"} 1' in text
        assert 'imgcache_stage_duration_ms_bucket{step="Encoding",le="500"} 2' in text
        assert 'imgcache_stage_duration_ms_bucket{step="Encoding",le="+Inf"} 2' in text
        assert 'imgcache_stage_duration_ms_count{step="Encoding"} 2' in text
        assert 'imgcache_stage_duration_ms_sum{step="Encoding"} 303.0' in text

    def test_observe_pipeline_records_every_stage(self):
        pipeline = PipelineMetrics()
        pipeline.record("Downloading", 0.0)
        pipeline.record("Decoding", 2.0)
        metrics = TransformMetrics()

        metrics.observe_pipeline(pipeline)

        histograms = metrics.get_summary()["histograms"]["stage_duration_ms"]
        assert histograms == {
            "step=Downloading": {"count": 1, "sum": 0.0},
            "step=Decoding": {"count": 1, "sum": 2.0},
        }

    def test_empty_collector_exports_newline(self):
        assert TransformMetrics().to_prometheus_format() == "\n"

    def test_thread_safe_counting(self):
        metrics = TransformMetrics()

        def bump():
            for _ in range(1000):
                metrics.inc_transforms_total("transformed")

        threads = [threading.Thread(target=bump) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert metrics.get_summary()["counters"]["transforms_total"] == {
            "status=transformed": 4000
        }


class TestGlobalInstance:
    def test_singleton_and_reset(self):
        first = get_transform_metrics()
        assert get_transform_metrics() is first
        reset_transform_metrics()
        assert get_transform_metrics() is not first
