"""
Host information utilities for benchmark reports.
"""

import os
import platform
from typing import Any, Dict, Optional

import numpy as np

from .perf_counters import PerfCounters


class SystemInfo:
    """Collect and provide information about the benchmarking host."""

    def __init__(self, perf_binary: str = "perf"):
        self._perf = PerfCounters(perf_binary=perf_binary)

    @property
    def perf_available(self) -> bool:
        """Check if perf is installed."""
        return self._perf.available

    @property
    def cpu_count(self) -> int:
        """Get number of logical CPUs."""
        return os.cpu_count() or 1

    def get_cpu_name(self) -> Optional[str]:
        """Get the CPU model name from /proc/cpuinfo, falling back to platform."""
        try:
            with open("/proc/cpuinfo") as f:
                for line in f:
                    if line.startswith("model name"):
                        return line.split(":", 1)[1].strip()
        except OSError:
            pass
        return platform.processor() or None

    def get_system_info(self) -> Dict[str, Any]:
        """Get system information."""
        info = {
            "platform": platform.platform(),
            "python_implementation": platform.python_implementation(),
            "python_version": platform.python_version(),
            "numpy_version": np.__version__,
            "cpu_count": self.cpu_count,
            "cpu_name": self.get_cpu_name(),
            "perf_available": self.perf_available,
        }

        if self.perf_available:
            info["perf_version"] = self._perf.get_version()

        return info

    def print_system_info(self) -> None:
        """Print formatted system information."""
        info = self.get_system_info()

        print("=" * 60)
        print("System Information")
        print("=" * 60)

        if info["cpu_name"]:
            print(f"CPU: {info['cpu_name']}")
        print(f"Logical CPUs: {info['cpu_count']}")

        print("\nSoftware Information:")
        print(f"Platform: {info['platform']}")
        print(f"Python: {info['python_implementation']} {info['python_version']}")
        print(f"NumPy: {info['numpy_version']}")
        if info.get("perf_version"):
            print(f"perf: {info['perf_version']}")
        else:
            print("perf: not available")

        print("=" * 60)
