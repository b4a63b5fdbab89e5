#!/usr/bin/env python3

"""Utilities for tuni runs."""

from .performance_monitor import PerformanceMonitor, PerformanceMetrics

__all__ = ['PerformanceMonitor', 'PerformanceMetrics']
