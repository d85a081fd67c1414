"""
Utility modules for the best-price router.

This module provides logging, performance monitoring, and other
utility functions for the router.
"""

from .logger import setup_logging, get_logger, MatchingEngineLogger
from .performance import PerformanceMonitor, benchmark_function, measure_latency, get_performance_monitor

__all__ = [
    "setup_logging",
    "get_logger",
    "MatchingEngineLogger",
    "PerformanceMonitor",
    "benchmark_function",
    "measure_latency",
    "get_performance_monitor",
]
