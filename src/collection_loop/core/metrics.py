"""
Performance metrics collection and analysis utilities.
"""

import gc
import time
import tracemalloc
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .config import TIME_UNITS
from .perf_counters import PerfCounters

# upper bound on calls between two clock reads
MAX_BATCH = 1 << 16


@dataclass
class BenchmarkResult:
    """Container for benchmark results."""

    name: str
    backend: str  # variant under test
    execution_time: float  # nanoseconds per operation
    operations: Optional[int] = None  # calls measured
    throughput: Optional[float] = None  # operations per second
    allocations: Optional[int] = None  # blocks still allocated after one call
    metadata: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}


class MetricsCollector:
    """Collect and analyze performance metrics."""

    def __init__(self):
        self.sink: Any = None
        self._last_time: int = 0
        self._results: List[BenchmarkResult] = []

    def clear_cache(self) -> None:
        """Run a full garbage collection."""
        gc.collect()

    @contextmanager
    def time_execution(self):
        """Context manager timing the enclosed block in nanoseconds."""
        start_time = time.perf_counter_ns()
        yield
        self._last_time = time.perf_counter_ns() - start_time

    def run_iteration(
        self, func: Callable, args: tuple, kwargs: dict, budget: float
    ) -> Tuple[int, int]:
        """Call ``func`` until ``budget`` seconds have elapsed.

        Calls are issued in doubling batches so the clock is read rarely for
        fast operations. Every output goes to ``self.sink``.

        Returns:
            Tuple of (operations, elapsed nanoseconds)
        """
        deadline = time.perf_counter_ns() + int(budget * 1e9)
        operations = 0
        batch = 1

        with self.time_execution():
            while True:
                for _ in range(batch):
                    self.sink = func(*args, **kwargs)
                operations += batch
                if time.perf_counter_ns() >= deadline:
                    break
                batch = min(batch * 2, MAX_BATCH)

        return operations, self._last_time

    @staticmethod
    def count_allocations(func: Callable, *args, **kwargs) -> int:
        """Count memory blocks a single call leaves allocated.

        The output is kept alive until the second snapshot, so the blocks of
        a freshly built result are included.
        """
        tracemalloc.start()
        try:
            before = tracemalloc.take_snapshot()
            output = func(*args, **kwargs)
            after = tracemalloc.take_snapshot()
        finally:
            tracemalloc.stop()

        ignore = [tracemalloc.Filter(False, tracemalloc.__file__)]
        stats = after.filter_traces(ignore).compare_to(
            before.filter_traces(ignore), "lineno"
        )
        del output
        return sum(max(stat.count_diff, 0) for stat in stats)

    def benchmark_function(
        self,
        func: Callable,
        name: str,
        backend: str,
        args: tuple = (),
        kwargs: dict = None,
        warmup_iterations: int = 5,
        warmup_time: float = 0.2,
        measurement_iterations: int = 5,
        measurement_time: float = 1.0,
        perf_counters: Optional[PerfCounters] = None,
        count_allocations: bool = True,
    ) -> BenchmarkResult:
        """Benchmark a function, averaging time per call.

        Args:
            func: Function to benchmark
            name: Benchmark name
            backend: Variant identifier
            args: Function arguments
            kwargs: Function keyword arguments
            warmup_iterations: Number of warmup iterations
            warmup_time: Seconds per warmup iteration
            measurement_iterations: Number of measured iterations
            measurement_time: Seconds per measured iteration
            perf_counters: Attach perf to the measured iterations when given
            count_allocations: Record the tracemalloc block count of one call

        Returns:
            BenchmarkResult with collected metrics
        """
        if kwargs is None:
            kwargs = {}

        self.clear_cache()

        # Warmup iterations
        for _ in range(warmup_iterations):
            self.run_iteration(func, args, kwargs, warmup_time)

        def measure() -> Tuple[List[float], int]:
            times = []
            total_ops = 0
            for _ in range(measurement_iterations):
                operations, elapsed = self.run_iteration(
                    func, args, kwargs, measurement_time
                )
                times.append(elapsed / operations)
                total_ops += operations
            return times, total_ops

        counters = None
        if perf_counters is not None:
            (times, total_ops), counters = perf_counters.measure(measure)
        else:
            times, total_ops = measure()

        # Calculate statistics
        execution_time = float(np.mean(times))
        throughput = 1e9 / execution_time if execution_time > 0 else None

        allocations = None
        if count_allocations:
            allocations = self.count_allocations(func, *args, **kwargs)

        metadata = {
            "warmup_iterations": warmup_iterations,
            "measurement_iterations": measurement_iterations,
            "execution_times": times,
            "std_dev": float(np.std(times)),
            "min_time": float(np.min(times)),
            "max_time": float(np.max(times)),
        }
        if counters:
            metadata["perf_counters"] = counters
            metadata["perf_counters_per_op"] = {
                event: value / total_ops for event, value in counters.items()
            }

        result = BenchmarkResult(
            name=name,
            backend=backend,
            execution_time=execution_time,
            operations=total_ops,
            throughput=throughput,
            allocations=allocations,
            metadata=metadata,
        )

        self._results.append(result)
        return result

    def get_results(self) -> List[BenchmarkResult]:
        """Get all collected benchmark results."""
        return self._results.copy()

    def clear_results(self) -> None:
        """Clear all collected results."""
        self._results.clear()

    def compare_results(
        self, baseline_backend: str = "index_loop"
    ) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Compare results across variants.

        Args:
            baseline_backend: Variant to use as baseline for speedup calculation

        Returns:
            Dictionary with comparison metrics
        """
        # group results by benchmark name
        grouped = {}
        for result in self._results:
            grouped.setdefault(result.name, {})[result.backend] = result

        comparisons = {}
        for bench_name, backends in grouped.items():
            if baseline_backend not in backends:
                continue

            baseline = backends[baseline_backend]
            comparisons[bench_name] = {}

            for backend_name, result in backends.items():
                if backend_name == baseline_backend:
                    speedup = 1.0
                else:
                    speedup = baseline.execution_time / result.execution_time

                comparisons[bench_name][backend_name] = {
                    "execution_time": result.execution_time,
                    "speedup": speedup,
                    "throughput": result.throughput,
                    "allocations": result.allocations,
                }

        return comparisons

    def print_results(self, time_unit: str = "ns") -> None:
        """Print formatted benchmark results."""
        if not self._results:
            print("No benchmark results available.")
            return

        scale = TIME_UNITS[time_unit]

        print("\n" + "=" * 80)
        print(f"BENCHMARK RESULTS (average time, {time_unit}/op)")
        print("=" * 80)

        # group by benchmark name
        grouped = {}
        for result in self._results:
            grouped.setdefault(result.name, []).append(result)

        for bench_name, results in grouped.items():
            print(f"\n{bench_name.upper()}")
            print("-" * 40)

            # sort by execution time
            results.sort(key=lambda x: x.execution_time)

            for result in results:
                error = result.metadata.get("std_dev", 0.0) / scale
                print(
                    f"{result.backend:>22}: {result.execution_time / scale:>12.3f}"
                    f" ± {error:>8.3f} {time_unit}/op",
                    end="",
                )

                if result.allocations is not None:
                    print(f" | {result.allocations:>4} allocs", end="")

                print()

                counters = result.metadata.get("perf_counters_per_op")
                if counters:
                    for event, value in counters.items():
                        print(f"{'':>24}{event}: {value:,.1f}/op")

            # show speedups relative to slowest
            if len(results) > 1:
                slowest_time = results[-1].execution_time
                print("\nSpeedup vs slowest:")
                for result in results:
                    speedup = slowest_time / result.execution_time
                    print(f"{result.backend:>22}: {speedup:>6.2f}x")

        print("=" * 80)
