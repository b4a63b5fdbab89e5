#!/usr/bin/env python3

"""
Performance monitoring for transcript unification runs.

Tracks processing time and memory usage per phase (signature collection,
label assignment, output rewriting).
"""

import time
import logging
import psutil
from dataclasses import dataclass
from typing import Optional, Dict, Any
from contextlib import contextmanager

from ..core.exceptions import MemoryLimitError


@dataclass
class PerformanceMetrics:
    """Timing, memory and work done in one phase."""
    phase_name: str
    start_time: float
    end_time: Optional[float] = None
    peak_memory_mb: float = 0.0
    operations_count: int = 0

    @property
    def elapsed_time(self) -> float:
        end_time = time.time() if self.end_time is None else self.end_time
        return end_time - self.start_time

    @property
    def operations_per_second(self) -> float:
        elapsed = self.elapsed_time
        return self.operations_count / elapsed if elapsed > 0 else 0.0


class PerformanceMonitor:
    """Phase timing and resident memory tracking for one process."""

    def __init__(self, memory_limit_mb: int = 4096):
        self.memory_limit_mb = memory_limit_mb
        self.start_time = time.time()
        self.phase_metrics: Dict[str, PerformanceMetrics] = {}
        self.current_phase: Optional[PerformanceMetrics] = None

        try:
            self.process = psutil.Process()
        except psutil.Error as e:
            self.process = None
            logging.warning(f"Cannot inspect current process, memory monitoring disabled: {e}")

    def get_memory_usage(self) -> float:
        """Resident memory in MB, also folded into the current phase's peak."""
        if not self.process:
            return 0.0

        try:
            memory_mb = self.process.memory_info().rss / 1024 / 1024
        except psutil.Error as e:
            logging.warning(f"Error getting memory usage: {e}")
            return 0.0

        if self.current_phase:
            self.current_phase.peak_memory_mb = max(self.current_phase.peak_memory_mb, memory_mb)
        return memory_mb

    def check_memory_limit(self) -> None:
        """
        Raises:
            MemoryLimitError: if resident memory exceeds memory_limit_mb.
        """
        current_memory = self.get_memory_usage()
        if current_memory > self.memory_limit_mb:
            logging.warning(f"Memory usage exceeded limit: {current_memory:.1f}MB > {self.memory_limit_mb}MB")
            raise MemoryLimitError("Memory usage exceeded limit", current_memory, self.memory_limit_mb)

    @contextmanager
    def phase_context(self, phase_name: str):
        """Time a phase; the yielded metrics take the phase's operation count."""
        metrics = PerformanceMetrics(phase_name=phase_name, start_time=time.time())
        self.phase_metrics[phase_name] = metrics
        self.current_phase = metrics
        self.get_memory_usage()
        logging.info(f"Started phase: {phase_name}")

        try:
            yield metrics
        finally:
            self.get_memory_usage()
            metrics.end_time = time.time()
            self.current_phase = None
            logging.info(f"Completed phase {phase_name} in {metrics.elapsed_time:.2f}s "
                         f"(peak memory: {metrics.peak_memory_mb:.1f}MB)")

    def get_peak_memory(self) -> float:
        """Peak memory across all phases, or the current usage before any phase."""
        if not self.phase_metrics:
            return self.get_memory_usage()
        return max(metrics.peak_memory_mb for metrics in self.phase_metrics.values())

    def get_performance_summary(self) -> Dict[str, Any]:
        return {
            "total_elapsed_time": time.time() - self.start_time,
            "peak_memory_mb": self.get_peak_memory(),
            "memory_limit_mb": self.memory_limit_mb,
            "phases": {
                phase_name: {
                    "elapsed_time": metrics.elapsed_time,
                    "operations_count": metrics.operations_count,
                    "operations_per_second": metrics.operations_per_second,
                    "peak_memory_mb": metrics.peak_memory_mb,
                }
                for phase_name, metrics in self.phase_metrics.items()
            },
        }

    def log_performance_report(self) -> None:
        summary = self.get_performance_summary()

        logging.info("=" * 50)
        logging.info("PERFORMANCE REPORT")
        logging.info("=" * 50)
        logging.info(f"Total time: {summary['total_elapsed_time']:.2f} seconds")
        logging.info(f"Peak memory: {summary['peak_memory_mb']:.1f} MB (limit {summary['memory_limit_mb']} MB)")

        for phase_name, phase_data in summary['phases'].items():
            logging.info(f"  {phase_name}: {phase_data['elapsed_time']:.2f}s, "
                         f"{phase_data['operations_count']} ops "
                         f"({phase_data['operations_per_second']:.1f} ops/s), "
                         f"{phase_data['peak_memory_mb']:.1f}MB")
