"""
Unit tests for request ids, metrics collection and the config helpers.
"""

import pytest

from palettekit.config import Config
from palettekit.utils.ids import extract_timestamp_from_request_id, generate_request_id
from palettekit.utils.metrics import MetricsCollector


class TestRequestIds:

    def test_format(self):
        request_id = generate_request_id("clu")
        prefix, timestamp, suffix = request_id.split("-")
        assert prefix == "clu"
        assert len(timestamp) == 14 and timestamp.isdigit()
        assert len(suffix) == 8

    def test_unique(self):
        assert len({generate_request_id() for _ in range(50)}) == 50

    def test_extract_timestamp(self):
        request_id = generate_request_id()
        assert extract_timestamp_from_request_id(request_id) == request_id.split("-")[1]
        assert extract_timestamp_from_request_id("not-an-id") == ""


class TestMetricsCollector:

    def test_run_counters(self):
        metrics = MetricsCollector()
        metrics.record_run(3, converged=True)
        metrics.record_run(300, converged=False, restarts=2)
        counters = metrics.get_counters()
        assert counters["cluster_runs_total"] == 2
        assert counters["cluster_not_converged_total"] == 1
        assert counters["cluster_restarts_total"] == 2

        stats = metrics.get_iteration_stats()
        assert stats["count"] == 2
        assert stats["min"] == 3 and stats["max"] == 300

    def test_percentiles(self):
        metrics = MetricsCollector()
        for value in (10.0, 20.0, 30.0, 40.0, 50.0):
            metrics.record_timing("cluster", value)
        stats = metrics.get_timing_stats()["cluster_duration_ms"]
        assert stats["p50"] == 30.0
        assert stats["p95"] == pytest.approx(48.0)
        assert stats["mean"] == 30.0

    def test_reset(self):
        metrics = MetricsCollector()
        metrics.increment_empty_cluster_count("remove", 2)
        metrics.increment_failure_count("InvalidKError")
        metrics.reset()
        summary = metrics.get_summary()
        assert summary["counters"] == {}
        assert summary["iteration_stats"] == {}


class TestConfig:

    def test_validate_k(self):
        assert Config.validate_k(1)
        assert Config.validate_k(Config.MAX_K)
        assert not Config.validate_k(0)
        assert not Config.validate_k(Config.MAX_K + 1)
