"""
Observability metrics for the PaletteKit color engine.

Provides a timing/memory context manager and an optional, caller-owned
collector that aggregates per-operation statistics. There is no global
collector: callers that want aggregation construct one and pass it in.
"""

import threading
import time
from collections import Counter, deque
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from typing import Any, Deque, Dict, List, Optional

import numpy as np
import psutil
from loguru import logger

# Durations kept per operation for percentile stats
DURATION_WINDOW = 100


@dataclass
class PerformanceMetrics:
    """Timing and memory of one engine call (extraction, batch job, ...)."""
    operation_name: str
    duration_ms: float
    memory_usage_mb: float
    timestamp: float
    context: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


class MetricsCollector:
    """Thread-safe, caller-owned store of recent engine metrics."""

    def __init__(self, max_history: int = 1000):
        self.max_history = max_history
        self._lock = threading.Lock()
        self._history: Deque[PerformanceMetrics] = deque(maxlen=max_history)
        self._calls: Counter = Counter()
        self._failures: Counter = Counter()
        self._durations: Dict[str, Deque[float]] = {}

    def record_performance(self, metrics: PerformanceMetrics) -> None:
        name = metrics.operation_name
        with self._lock:
            self._history.append(metrics)
            self._calls[name] += 1
            if metrics.error:
                self._failures[name] += 1
            self._durations.setdefault(name, deque(maxlen=DURATION_WINDOW)).append(metrics.duration_ms)

    def get_operation_stats(self, operation_name: str) -> Dict[str, Any]:
        """
        Aggregate calls, failures and duration percentiles of one operation.

        Returns:
            Stats dict, or an empty dict for an operation never recorded
        """
        with self._lock:
            if operation_name not in self._durations:
                return {}
            durations = np.array(self._durations[operation_name])
            calls = self._calls[operation_name]
            failures = self._failures[operation_name]

        return {
            "operation_name": operation_name,
            "total_calls": calls,
            "error_count": failures,
            "error_rate": failures / calls,
            "duration_stats": {
                "mean_ms": float(durations.mean()),
                "median_ms": float(np.median(durations)),
                "p95_ms": float(np.percentile(durations, 95)),
                "min_ms": float(durations.min()),
                "max_ms": float(durations.max()),
            },
        }

    def get_recent_metrics(self, limit: int = 10) -> List[Dict[str, Any]]:
        """The last ``limit`` records as plain dicts, oldest first."""
        with self._lock:
            return [asdict(m) for m in list(self._history)[-limit:]]


def _rss_mb() -> float:
    return psutil.Process().memory_info().rss / 1024 / 1024


@contextmanager
def performance_monitor(operation_name: str,
                        collector: Optional[MetricsCollector] = None,
                        **context: Any):
    """
    Time a block and record its peak RSS.

    Failures are recorded with their message and re-raised unchanged.

    Args:
        operation_name: Name the stats are grouped under
        collector: Where to record, nothing is kept when None
        **context: Extra fields stored with the record (image size, count, ...)
    """
    started = time.perf_counter()
    rss_before = _rss_mb()
    failure: Optional[str] = None

    try:
        yield
    except Exception as e:
        failure = str(e)
        raise
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        record = PerformanceMetrics(
            operation_name=operation_name,
            duration_ms=elapsed_ms,
            memory_usage_mb=max(_rss_mb(), rss_before),
            timestamp=time.time(),
            context=dict(context),
            error=failure,
        )
        if collector is not None:
            collector.record_performance(record)

        if failure:
            logger.error(f"{operation_name} failed after {elapsed_ms:.1f}ms: {failure}")
        else:
            logger.debug(f"{operation_name} took {elapsed_ms:.1f}ms "
                         f"(rss {record.memory_usage_mb:.1f}MB)")
