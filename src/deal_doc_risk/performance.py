"""Performance monitoring utilities for the analysis pipeline.

Tracks per-stage durations so slow analyzer calls show up in logs and in
pipeline statistics.
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Optional


logger = logging.getLogger(__name__)


@dataclass
class PerformanceMetrics:
    """Performance metrics for a pipeline operation."""

    operation_name: str
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    duration: Optional[float] = None
    success: bool = True
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def finish(self, success: bool = True, error: Optional[str] = None) -> None:
        """Mark the operation as finished."""
        self.end_time = time.time()
        self.duration = self.end_time - self.start_time
        self.success = success
        self.error = error


class PerformanceMonitor:
    """
    Monitor and track performance metrics for pipeline operations.

    Safe to share between threads analysing different documents.
    """

    def __init__(self, max_processing_time: float = 60, history_size: int = 1000):
        """
        Initialize the performance monitor.

        Args:
            max_processing_time: Seconds after which an operation is logged as slow.
            history_size: Most recent metrics kept per operation name.
        """
        self.max_processing_time = max_processing_time
        self.history_size = history_size
        self.metrics: Dict[str, Deque[PerformanceMetrics]] = {}
        self._lock = threading.Lock()

    def start_operation(self, operation_name: str, **metadata) -> PerformanceMetrics:
        """
        Start tracking an operation.

        Args:
            operation_name: Name of the operation.
            **metadata: Additional metadata to track.

        Returns:
            PerformanceMetrics object for this operation.
        """
        return PerformanceMetrics(operation_name=operation_name, metadata=metadata)

    def end_operation(
        self,
        metric: PerformanceMetrics,
        success: bool = True,
        error: Optional[str] = None
    ) -> None:
        """
        End tracking an operation.

        Args:
            metric: The metric returned by start_operation.
            success: Whether the operation succeeded.
            error: Optional error message.
        """
        metric.finish(success=success, error=error)

        with self._lock:
            self.metrics.setdefault(
                metric.operation_name, deque(maxlen=self.history_size)
            ).append(metric)

        if metric.duration and metric.duration > self.max_processing_time:
            logger.warning(
                f"Operation '{metric.operation_name}' exceeded max time: "
                f"{metric.duration:.2f}s > {self.max_processing_time}s"
            )

    def get_operation_stats(self, operation_name: str) -> Dict[str, Any]:
        """
        Get statistics for a specific operation.

        Covers only the retained history of the operation.

        Returns:
            Dictionary with statistics (count, average, min, max, total, success_rate).
        """
        with self._lock:
            metrics = list(self.metrics.get(operation_name, []))

        durations = [m.duration for m in metrics if m.duration is not None]
        if not durations:
            return {}

        return {
            "count": len(durations),
            "average": sum(durations) / len(durations),
            "min": min(durations),
            "max": max(durations),
            "total": sum(durations),
            "success_rate": sum(1 for m in metrics if m.success) / len(metrics),
        }

    def get_all_stats(self) -> Dict[str, Dict[str, Any]]:
        """Get statistics for all tracked operations."""
        with self._lock:
            names = list(self.metrics.keys())
        return {name: self.get_operation_stats(name) for name in names}

    def reset(self) -> None:
        """Reset all metrics."""
        with self._lock:
            self.metrics.clear()
