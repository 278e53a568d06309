"""
Collection Basics Example: Filtering Even Values

This example walks through the five filter variants measured by the
benchmark suite:
- Index loop with random access
- Range loop over the elements
- forEach-style callback
- filter pipeline materialised as a list
- filter pipeline collected into a pre-sized list

Learning objectives:
1. See that every variant returns the same values
2. Understand why an empty input returns a shared empty result
3. Compare per-call cost of the variants on a small input
"""

import time

from collection_loop.benchmarks.collection_loop import EMPTY, VARIANTS, FilterBenchmark
from collection_loop.core.metrics import MetricsCollector


def demonstrate_variants():
    """Show that every variant filters the same values."""
    print("=" * 60)
    print("FILTER VARIANTS")
    print("=" * 60)

    state = FilterBenchmark(10)
    state.setup()
    print(f"   Input: {list(state.values)}")

    for variant in VARIANTS:
        result = getattr(state, variant)()
        print(f"   {variant:>22}: {list(result)} ({type(result).__name__})")


def demonstrate_empty_input():
    """Show the shared empty result."""
    print("\n" + "=" * 60)
    print("EMPTY INPUT")
    print("=" * 60)

    state = FilterBenchmark(0)
    state.setup()

    for variant in VARIANTS:
        result = getattr(state, variant)()
        allocs = MetricsCollector.count_allocations(getattr(state, variant))
        print(
            f"   {variant:>22}: shared empty = {result is EMPTY}, allocations = {allocs}"
        )


def demonstrate_timing():
    """Time each variant with a plain perf_counter loop."""
    print("\n" + "=" * 60)
    print("QUICK TIMING (size = 1000)")
    print("=" * 60)

    state = FilterBenchmark(1000)
    state.setup()
    calls = 2000

    for variant in VARIANTS:
        func = getattr(state, variant)
        # warmup
        for _ in range(100):
            func()

        start_time = time.perf_counter()
        for _ in range(calls):
            func()
        per_call = (time.perf_counter() - start_time) / calls * 1e9
        print(f"   {variant:>22}: {per_call:>10.1f} ns/op")


def main():
    """Main function to run all demonstrations."""
    demonstrate_variants()
    demonstrate_empty_input()
    demonstrate_timing()

    print("\n" + "=" * 60)
    print("Next steps:")
    print("   - Run the full matrix: collection-loop run-all")
    print("   - Check the variants agree: collection-loop verify")
    print("   - Add hardware counters: collection-loop profile collection/filter-even index_loop")
    print("=" * 60)


if __name__ == "__main__":
    main()
