"""
Observability module for the PaletteKit color engine.

Timing and memory instrumentation for extraction and batch processing.
"""

from .metrics import (
    PerformanceMetrics,
    MetricsCollector,
    performance_monitor,
)

__all__ = [
    'PerformanceMetrics',
    'MetricsCollector',
    'performance_monitor',
]
