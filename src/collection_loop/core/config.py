"""
Harness configuration for benchmark runs.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

DEFAULT_SIZES: Tuple[int, ...] = (0, 1, 10, 100, 1000)

DEFAULT_PERF_EVENTS: Tuple[str, ...] = (
    "cycles",
    "instructions",
    "branches",
    "branch-misses",
    "cache-misses",
)

# nanoseconds per unit
TIME_UNITS: Dict[str, float] = {
    "ns": 1.0,
    "us": 1e3,
    "ms": 1e6,
}


@dataclass
class BenchmarkConfig:
    """Warmup/measurement settings for one benchmark run."""

    warmup_iterations: int = 5
    warmup_time: float = 0.2  # seconds per warmup iteration
    measurement_iterations: int = 5
    measurement_time: float = 1.0  # seconds per measurement iteration
    sizes: List[int] = field(default_factory=lambda: list(DEFAULT_SIZES))
    time_unit: str = "ns"
    profile_perf: bool = False
    perf_events: List[str] = field(default_factory=lambda: list(DEFAULT_PERF_EVENTS))

    def validate(self) -> "BenchmarkConfig":
        """Check the settings, returning self so calls can be chained.

        Raises:
            ValueError: If any setting is out of range
        """
        if self.warmup_iterations < 0:
            raise ValueError(
                f"warmup_iterations must be >= 0, got {self.warmup_iterations}"
            )
        if self.measurement_iterations < 1:
            raise ValueError(
                f"measurement_iterations must be >= 1, got {self.measurement_iterations}"
            )
        if self.warmup_time < 0 or self.measurement_time <= 0:
            raise ValueError("Iteration times must be positive")
        if not self.sizes:
            raise ValueError("At least one size is required")
        negative = [size for size in self.sizes if size < 0]
        if negative:
            raise ValueError(f"Sizes must be non-negative, got {negative}")
        if self.time_unit not in TIME_UNITS:
            raise ValueError(
                f"Unknown time unit: {self.time_unit} (expected one of {', '.join(TIME_UNITS)})"
            )
        return self

    @property
    def unit_scale(self) -> float:
        """Nanoseconds per configured output unit."""
        return TIME_UNITS[self.time_unit]
