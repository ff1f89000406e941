"""
palettekit Metrics Collection
In-process metrics for clustering runs: counters, timings and iteration counts.
"""
import time
from collections import defaultdict, Counter
from typing import Any, Dict, List, Optional
from threading import Lock

import numpy as np


class MetricsCollector:
    """Simple thread-safe in-process metrics collector."""

    def __init__(self):
        self._lock = Lock()
        self._counters: Dict[str, int] = Counter()
        self._timings: Dict[str, List[float]] = defaultdict(list)
        self._iterations: List[int] = []
        self._start_time = time.time()

    def record_run(self, iterations: int, converged: bool, restarts: int = 0):
        """Record the outcome of one clustering run."""
        with self._lock:
            self._counters["cluster_runs_total"] += 1
            if not converged:
                self._counters["cluster_not_converged_total"] += 1
            if restarts:
                self._counters["cluster_restarts_total"] += restarts
            self._iterations.append(iterations)

    def increment_empty_cluster_count(self, policy: str, count: int = 1):
        """Count empty clusters resolved by a given policy."""
        with self._lock:
            self._counters[f"cluster_empty_total_{policy}"] += count

    def increment_failure_count(self, error_type: str):
        """Count a rejected or failed request, keyed by exception class name."""
        with self._lock:
            self._counters[f"cluster_failed_total_{error_type}"] += 1

    def record_timing(self, operation: str, duration_ms: float):
        """Append a duration sample for ``operation``."""
        with self._lock:
            self._timings[f"{operation}_duration_ms"].append(duration_ms)

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Get count/mean/min/max/p50/p95 per timed operation."""
        with self._lock:
            return {
                operation: self._summarize(timings)
                for operation, timings in self._timings.items()
                if timings
            }

    def get_iteration_stats(self) -> Dict[str, float]:
        with self._lock:
            if not self._iterations:
                return {}
            return self._summarize([float(i) for i in self._iterations])

    def get_uptime_seconds(self) -> float:
        return time.time() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        """Snapshot of everything collected, as served by /metrics."""
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
            "iteration_stats": self.get_iteration_stats(),
        }

    def reset(self):
        """Drop all samples and restart the uptime clock."""
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._iterations.clear()
            self._start_time = time.time()

    @staticmethod
    def _summarize(values: List[float]) -> Dict[str, float]:
        arr = np.asarray(values, dtype=float)
        p50, p95 = np.percentile(arr, [50, 95])
        return {
            "count": int(arr.size),
            "mean": float(arr.mean()),
            "min": float(arr.min()),
            "max": float(arr.max()),
            "p50": float(p50),
            "p95": float(p95),
        }


# Global metrics instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Process-wide collector, created on first use."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Clear the process-wide collector, if one exists."""
    global _metrics
    if _metrics is not None:
        _metrics.reset()
