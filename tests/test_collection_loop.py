"""
Tests for the collection loop filter variants.
"""

import math

import pytest

from collection_loop.benchmarks.collection_loop import (
    EMPTY,
    VARIANTS,
    FilterBenchmark,
    collect,
    filter_reference,
    for_each,
    prepare,
    presized,
)

SIZES = [0, 1, 10, 100, 1000]


def run_variant(size, variant):
    state = FilterBenchmark(size)
    state.setup()
    return state, getattr(state, variant)()


class TestPrepare:
    """Tests for input preparation."""

    def test_values_ascending(self):
        assert prepare(5) == [0, 1, 2, 3, 4]

    def test_empty_is_shared(self):
        assert prepare(0) is EMPTY
        assert prepare(0) is prepare(0)

    def test_negative_treated_as_empty(self):
        assert prepare(-3) is EMPTY

    def test_setup_rebuilds_values(self):
        state = FilterBenchmark(3)
        assert state.values is EMPTY

        state.setup()
        assert state.values == [0, 1, 2]

        state.loop_iterations = 0
        state.setup()
        assert state.values is EMPTY


class TestHelpers:
    """Tests for the traversal and collection helpers."""

    def test_presized(self):
        assert presized(EMPTY) is EMPTY
        assert len(presized([7, 8, 9])) == 3

    def test_for_each_visits_in_order(self):
        seen = []
        for_each([3, 1, 2], seen.append)
        assert seen == [3, 1, 2]

    def test_collect_truncates(self):
        result = collect(iter([4, 6]), lambda: [0] * 5)
        assert result == [4, 6]

    def test_collect_into_empty_container(self):
        assert collect(iter(()), lambda: EMPTY) is EMPTY


@pytest.mark.parametrize("variant", VARIANTS)
class TestVariants:
    """Properties every filter variant must hold."""

    @pytest.mark.parametrize("size", SIZES)
    def test_even_subsequence(self, variant, size):
        state, result = run_variant(size, variant)

        assert all(value % 2 == 0 for value in result)
        # order-preserving subsequence of the input
        remaining = iter(state.values)
        assert all(value in remaining for value in result)

    @pytest.mark.parametrize("size", SIZES)
    def test_result_length(self, variant, size):
        _, result = run_variant(size, variant)
        assert len(result) == math.ceil(size / 2)

    def test_empty_input_returns_shared_empty(self, variant):
        _, result = run_variant(0, variant)
        assert result is EMPTY

    def test_single_value(self, variant):
        _, result = run_variant(1, variant)
        assert result == [0]

    def test_ten_values(self, variant):
        _, result = run_variant(10, variant)
        assert result == [0, 2, 4, 6, 8]

    def test_input_not_modified(self, variant):
        state, _ = run_variant(100, variant)
        assert state.values == list(range(100))

    def test_repeated_calls_are_idempotent(self, variant):
        state = FilterBenchmark(100)
        results = []
        for _ in range(3):
            state.setup()
            results.append(getattr(state, variant)())

        assert results[0] == results[1] == results[2]

    def test_fresh_result_per_call(self, variant):
        state, first = run_variant(10, variant)
        second = getattr(state, variant)()
        assert first == second
        assert first is not second

    def test_arbitrary_input(self, variant):
        state = FilterBenchmark()
        state.values = [5, 8, -2, 7, 0, 13, 22]
        assert getattr(state, variant)() == [8, -2, 0, 22]


@pytest.mark.parametrize("size", SIZES)
def test_variants_return_equal_lists(size):
    state = FilterBenchmark(size)
    state.setup()

    results = {variant: getattr(state, variant)() for variant in VARIANTS}
    for variant, result in results.items():
        assert result == results["index_loop"], variant
        if size:
            assert isinstance(result, list), variant


@pytest.mark.parametrize("size", SIZES)
def test_variants_agree(size):
    state = FilterBenchmark(size)
    state.setup()

    expected = filter_reference(state.values)
    for variant in VARIANTS:
        assert getattr(state, variant)() == expected, variant


def test_pipeline_skips_predicate_for_empty_input(monkeypatch):
    calls = []

    def counting_is_even(value):
        calls.append(value)
        return value % 2 == 0

    monkeypatch.setattr(
        "collection_loop.benchmarks.collection_loop.is_even", counting_is_even
    )
    state = FilterBenchmark(0)
    state.setup()
    assert state.stream_to_list() is EMPTY
    assert state.stream_to_collection() is EMPTY
    assert calls == []

    state = FilterBenchmark(4)
    state.setup()
    state.stream_to_list()
    assert calls == [0, 1, 2, 3]


if __name__ == "__main__":
    pytest.main([__file__])
