"""
Core benchmark infrastructure.
"""

from .benchmark_runner import BenchmarkRunner, VerificationError
from .config import BenchmarkConfig
from .metrics import BenchmarkResult, MetricsCollector
from .perf_counters import PerfCounters
from .system_info import SystemInfo

__all__ = [
    "BenchmarkConfig",
    "BenchmarkRunner",
    "MetricsCollector",
    "BenchmarkResult",
    "PerfCounters",
    "SystemInfo",
    "VerificationError",
]
