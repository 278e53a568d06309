"""
Tests for the command-line interface.
"""

import pytest
from typer.testing import CliRunner

from collection_loop.cli import app

runner = CliRunner()

FAST = [
    "--warmup",
    "0",
    "--warmup-time",
    "0",
    "--iterations",
    "1",
    "--iteration-time",
    "0.001",
]


def test_system_info():
    result = runner.invoke(app, ["system-info"])
    assert result.exit_code == 0
    assert "System Information" in result.stdout


def test_list_benchmarks():
    result = runner.invoke(app, ["list-benchmarks"])
    assert result.exit_code == 0
    assert "collection" in result.stdout


def test_list_benchmarks_unknown_category():
    result = runner.invoke(app, ["list-benchmarks", "--category", "missing"])
    assert result.exit_code == 0
    assert "No benchmarks found" in result.stdout


def test_run_category():
    result = runner.invoke(app, ["run", "collection", "--size", "10"] + FAST)
    assert result.exit_code == 0, result.stdout
    assert "FILTER-EVEN_SIZE_10" in result.stdout
    assert "Variant Comparison" in result.stdout


def test_run_single_variant():
    result = runner.invoke(
        app,
        ["run", "collection", "-b", "filter-even", "--variant", "for_each", "--size", "1"]
        + FAST,
    )
    assert result.exit_code == 0, result.stdout
    assert "for_each" in result.stdout


def test_run_invalid_unit():
    result = runner.invoke(app, ["run", "collection", "--unit", "s"] + FAST)
    assert result.exit_code == 1
    assert "Unknown time unit" in result.stdout


def test_run_all():
    result = runner.invoke(app, ["run-all", "--size", "0", "--unit", "us"] + FAST)
    assert result.exit_code == 0, result.stdout
    assert "us/op" in result.stdout


def test_verify():
    result = runner.invoke(app, ["verify", "--size", "0", "--size", "10"])
    assert result.exit_code == 0, result.stdout
    assert "All variants agree" in result.stdout


def test_compare_requires_category_and_name():
    result = runner.invoke(app, ["compare", "filter-even"])
    assert result.exit_code == 1
    assert "category/name" in result.stdout


def test_compare():
    result = runner.invoke(
        app,
        [
            "compare",
            "collection/filter-even",
            "--size",
            "10",
            "--iterations",
            "1",
            "--iteration-time",
            "0.001",
            "--baseline",
            "range_loop",
            "--warmup",
            "0",
        ],
    )
    assert result.exit_code == 0, result.stdout
    assert "Speedup relative to range_loop" in result.stdout


def test_profile_unknown_variant():
    result = runner.invoke(
        app, ["profile", "collection/filter-even", "while_loop", "--iteration-time", "0.001"]
    )
    assert result.exit_code == 1
    assert "Unknown variant" in result.stdout


if __name__ == "__main__":
    pytest.main([__file__])
