"""
Collection loop benchmarks comparing ways to filter even values out of a list.
"""

from typing import Callable, Iterable, MutableSequence, Sequence

# shared immutable empty result, returned instead of allocating for empty input
EMPTY: Sequence[int] = ()

VARIANTS = (
    "index_loop",
    "range_loop",
    "for_each",
    "stream_to_list",
    "stream_to_collection",
)


def is_even(value: int) -> bool:
    """Filter predicate shared by all variants."""
    return value % 2 == 0


def prepare(n: int) -> Sequence[int]:
    """Build the input sequence ``0..n-1``.

    Args:
        n: Number of values

    Returns:
        A list of ``n`` ascending integers, or ``EMPTY`` when ``n`` is 0
    """
    if n <= 0:
        return EMPTY

    return list(range(n))


def presized(values: Sequence[int]) -> Sequence[int]:
    """Return a result buffer with one slot per input value.

    Empty input gets the immutable ``EMPTY`` instead of a new list.
    """
    return [0] * len(values) if values else EMPTY


def for_each(iterable: Iterable[int], action: Callable[[int], None]) -> None:
    """Push every element of ``iterable`` into ``action``."""
    for value in iterable:
        action(value)


def collect(
    iterable: Iterable[int], supplier: Callable[[], MutableSequence[int]]
) -> Sequence[int]:
    """Collect a pipeline into the container produced by ``supplier``.

    The container is filled slot by slot and truncated to the number of
    collected elements. A container with no slots is returned untouched.
    """
    result = supplier()
    count = 0
    for value in iterable:
        result[count] = value
        count += 1
    if count < len(result):
        del result[count:]
    return result


class FilterBenchmark:
    """Benchmark state: the input values plus the five filter variants."""

    def __init__(self, loop_iterations: int = 0):
        self.loop_iterations = loop_iterations
        self.values: Sequence[int] = EMPTY

    def setup(self) -> None:
        """Rebuild the input values for the current configuration."""
        self.values = prepare(self.loop_iterations)

    def index_loop(self) -> Sequence[int]:
        local_values = self.values
        size = len(local_values)

        result = presized(local_values)
        count = 0
        for i in range(size):
            value = local_values[i]
            if value % 2 == 0:
                result[count] = value
                count += 1
        if count < size:
            del result[count:]
        return result

    def range_loop(self) -> Sequence[int]:
        values = self.values
        result = presized(values)
        count = 0
        for value in values:
            if value % 2 == 0:
                result[count] = value
                count += 1
        if count < len(values):
            del result[count:]
        return result

    def for_each(self) -> Sequence[int]:
        values = self.values
        if not values:
            return EMPTY

        result = presized(values)
        count = 0

        def add_if_even(value: int) -> None:
            nonlocal count
            if value % 2 == 0:
                result[count] = value
                count += 1

        for_each(values, add_if_even)
        del result[count:]
        return result

    def stream_to_list(self) -> Sequence[int]:
        values = self.values
        return list(filter(is_even, values)) if values else EMPTY

    def stream_to_collection(self) -> Sequence[int]:
        return collect(filter(is_even, self.values), lambda: presized(self.values))


def filter_reference(values: Sequence[int]) -> Sequence[int]:
    """Straightforward comprehension used to verify the variants."""
    if not values:
        return EMPTY
    return [value for value in values if is_even(value)]


def register_collection_loop_benchmarks(runner):
    """Register the collection loop benchmark with the runner."""
    runner.register_benchmark(
        "collection",
        "filter-even",
        state_factory=FilterBenchmark,
        variants=VARIANTS,
        reference=filter_reference,
    )
