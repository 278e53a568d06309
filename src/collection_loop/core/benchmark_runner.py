"""
Main benchmark runner orchestrating benchmark states and their variants.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

from .config import BenchmarkConfig
from .metrics import BenchmarkResult, MetricsCollector
from .perf_counters import PerfCounters
from .system_info import SystemInfo


class VerificationError(ValueError):
    """A variant produced a result different from the reference."""


class BenchmarkRunner:
    """Main benchmark runner class."""

    def __init__(self, config: Optional[BenchmarkConfig] = None):
        """Initialize benchmark runner.

        Args:
            config: Harness settings, defaults to BenchmarkConfig()
        """
        self.config = (config or BenchmarkConfig()).validate()
        self.system_info = SystemInfo()
        self.metrics_collector = MetricsCollector()
        self._registered_benchmarks: Dict[str, Dict[str, Dict[str, Any]]] = {}

        # load available benchmarks
        self._load_benchmarks()

    def _load_benchmarks(self) -> None:
        """Load and register available benchmark implementations."""
        from ..benchmarks.collection_loop import register_collection_loop_benchmarks

        register_collection_loop_benchmarks(self)

    def register_benchmark(
        self,
        category: str,
        name: str,
        state_factory: Callable[[int], Any],
        variants: Sequence[str],
        reference: Optional[Callable[[Sequence[int]], Sequence[int]]] = None,
    ) -> None:
        """Register a benchmark state class and the variants it measures.

        Args:
            category: Benchmark category
            name: Benchmark name
            state_factory: Callable taking the size parameter and returning a
                state object with a ``setup()`` method and one method per variant
            variants: Names of the variant methods on the state object
            reference: Function computing the expected result from the state's
                ``values``, used by verify_benchmark
        """
        if category not in self._registered_benchmarks:
            self._registered_benchmarks[category] = {}

        self._registered_benchmarks[category][name] = {
            "state_factory": state_factory,
            "variants": list(variants),
            "reference": reference,
        }

    def _get_benchmark(self, category: str, name: str) -> Dict[str, Any]:
        if category not in self._registered_benchmarks:
            raise ValueError(f"Unknown benchmark category: {category}")

        if name not in self._registered_benchmarks[category]:
            raise ValueError(f"Unknown benchmark: {name} in category {category}")

        return self._registered_benchmarks[category][name]

    def list_benchmarks(self, category: Optional[str] = None) -> Dict[str, List[str]]:
        """List available benchmarks.

        Args:
            category: Specific category to list, or None for all

        Returns:
            Dictionary mapping categories to benchmark names
        """
        if category:
            if category in self._registered_benchmarks:
                return {category: list(self._registered_benchmarks[category].keys())}
            else:
                return {}

        return {
            cat: list(benchmarks.keys())
            for cat, benchmarks in self._registered_benchmarks.items()
            if benchmarks
        }

    def list_variants(self, category: str, name: str) -> List[str]:
        """List the variants registered for a benchmark."""
        return list(self._get_benchmark(category, name)["variants"])

    def _resolve_variants(
        self, benchmark_def: Dict[str, Any], name: str, variants: Optional[List[str]]
    ) -> List[str]:
        if not variants:
            return list(benchmark_def["variants"])

        unknown = [v for v in variants if v not in benchmark_def["variants"]]
        if unknown:
            raise ValueError(f"Unknown variant(s) for {name}: {', '.join(unknown)}")
        return list(variants)

    def _make_perf_counters(self) -> Optional[PerfCounters]:
        if not self.config.profile_perf:
            return None

        perf_counters = PerfCounters(self.config.perf_events)
        if not perf_counters.available:
            print("Warning: perf not found, hardware counters disabled")
            return None
        return perf_counters

    def run_benchmark(
        self,
        category: str,
        name: str,
        variants: List[str] = None,
        sizes: List[int] = None,
    ) -> List[BenchmarkResult]:
        """Run a specific benchmark across variants and sizes.

        The state is created and set up once per size; every variant then
        runs against the same input.

        Args:
            category: Benchmark category
            name: Benchmark name
            variants: Variants to test, or None for all registered
            sizes: Sizes to test, or None for the configured sizes

        Returns:
            List of BenchmarkResult objects
        """
        benchmark_def = self._get_benchmark(category, name)
        variants = self._resolve_variants(benchmark_def, name, variants)

        if sizes is None:
            sizes = self.config.sizes
        if any(size < 0 for size in sizes):
            raise ValueError(f"Sizes must be non-negative, got {list(sizes)}")

        perf_counters = self._make_perf_counters()
        results = []

        for size in sizes:
            state = benchmark_def["state_factory"](size)
            state.setup()

            for variant in variants:
                try:
                    result = self.metrics_collector.benchmark_function(
                        func=getattr(state, variant),
                        name=f"{name}_size_{size}",
                        backend=variant,
                        warmup_iterations=self.config.warmup_iterations,
                        warmup_time=self.config.warmup_time,
                        measurement_iterations=self.config.measurement_iterations,
                        measurement_time=self.config.measurement_time,
                        perf_counters=perf_counters,
                    )

                    # add size information to metadata
                    result.metadata["size"] = size
                    result.metadata["category"] = category
                    results.append(result)

                except Exception as e:
                    print(f"Error running {variant} {name} (size {size}): {e}")

        return results

    def run_category(
        self,
        category: str,
        variants: List[str] = None,
        sizes: List[int] = None,
    ) -> List[BenchmarkResult]:
        """Run all benchmarks in a category.

        Args:
            category: Benchmark category to run
            variants: Variants to test
            sizes: Sizes to test

        Returns:
            List of all BenchmarkResult objects
        """
        if category not in self._registered_benchmarks:
            raise ValueError(f"Unknown benchmark category: {category}")

        results = []
        for benchmark_name in self._registered_benchmarks[category]:
            try:
                bench_results = self.run_benchmark(
                    category, benchmark_name, variants, sizes
                )
                results.extend(bench_results)
            except Exception as e:
                print(f"Error running benchmark {benchmark_name}: {e}")

        return results

    def run_all(
        self, variants: List[str] = None, sizes: List[int] = None
    ) -> List[BenchmarkResult]:
        """Run all available benchmarks.

        Args:
            variants: Variants to test
            sizes: Sizes to test

        Returns:
            List of all BenchmarkResult objects
        """
        results = []
        for category in self._registered_benchmarks:
            if self._registered_benchmarks[category]:  # only if category has benchmarks
                try:
                    cat_results = self.run_category(category, variants, sizes)
                    results.extend(cat_results)
                except Exception as e:
                    print(f"Error running category {category}: {e}")

        return results

    def verify_benchmark(
        self, category: str, name: str, sizes: List[int] = None
    ) -> Dict[int, Sequence[Any]]:
        """Check every variant against the reference for each size.

        Without a registered reference the first variant is the reference.
        The input values must also be left untouched by every variant.

        Returns:
            Mapping of size to the expected result

        Raises:
            VerificationError: If a variant disagrees with the reference
        """
        benchmark_def = self._get_benchmark(category, name)
        variants = benchmark_def["variants"]
        reference = benchmark_def["reference"]

        if sizes is None:
            sizes = self.config.sizes

        verified = {}
        for size in sizes:
            state = benchmark_def["state_factory"](size)
            state.setup()
            original = list(state.values)

            if reference is not None:
                expected = reference(state.values)
            else:
                expected = getattr(state, variants[0])()

            for variant in variants:
                actual = getattr(state, variant)()
                if actual != expected:
                    raise VerificationError(
                        f"{name} variant {variant} (size {size}) returned "
                        f"{len(actual)} values, expected {len(expected)}"
                    )
                if list(state.values) != original:
                    raise VerificationError(
                        f"{name} variant {variant} (size {size}) modified its input"
                    )

            verified[size] = expected

        return verified

    def profile_benchmark(
        self, category: str, name: str, variant: str, size: int = 1000
    ) -> Optional[BenchmarkResult]:
        """Profile one variant with perf hardware counters and allocation count.

        Args:
            category: Benchmark category
            name: Benchmark name
            variant: Variant to profile
            size: Size parameter
        """
        benchmark_def = self._get_benchmark(category, name)
        self._resolve_variants(benchmark_def, name, [variant])

        print(f"Profiling {variant} implementation of {category}/{name} with size {size}")

        state = benchmark_def["state_factory"](size)
        state.setup()

        perf_counters = PerfCounters(self.config.perf_events)
        if not perf_counters.available:
            print("Warning: perf not found, reporting timing and allocations only")
            perf_counters = None

        result = self.metrics_collector.benchmark_function(
            func=getattr(state, variant),
            name=f"{name}_size_{size}",
            backend=variant,
            warmup_iterations=1,
            warmup_time=self.config.warmup_time,
            measurement_iterations=1,
            measurement_time=self.config.measurement_time,
            perf_counters=perf_counters,
        )
        result.metadata["size"] = size
        result.metadata["category"] = category

        scale = self.config.unit_scale
        unit = self.config.time_unit
        print(f"Execution time: {result.execution_time / scale:.3f} {unit}/op")
        print(f"Operations: {result.operations:,}")
        print(f"Allocations per call: {result.allocations}")

        counters = result.metadata.get("perf_counters_per_op")
        if counters:
            for event, value in counters.items():
                print(f"{event}: {value:,.1f}/op")
        elif perf_counters is not None:
            print("perf recorded no counters (check perf_event_paranoid)")

        return result

    def get_system_info(self) -> None:
        """Print system information."""
        self.system_info.print_system_info()

    def clear_results(self) -> None:
        """Clear all collected results."""
        self.metrics_collector.clear_results()

    def get_results(self) -> List[BenchmarkResult]:
        """Get all collected results."""
        return self.metrics_collector.get_results()

    def print_results(self) -> None:
        """Print formatted results."""
        self.metrics_collector.print_results(self.config.time_unit)

    def compare_results(
        self, baseline_backend: str = "index_loop"
    ) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Compare results across variants."""
        return self.metrics_collector.compare_results(baseline_backend)
