"""
Collection Loop Benchmark

Microbenchmarks comparing loop, callback and pipeline styles for
filtering a list of integers.
"""

__version__ = "0.1.0"

from .core.benchmark_runner import BenchmarkRunner
from .core.config import BenchmarkConfig
from .core.metrics import MetricsCollector
from .core.system_info import SystemInfo

__all__ = [
    "BenchmarkConfig",
    "BenchmarkRunner",
    "MetricsCollector",
    "SystemInfo",
]
