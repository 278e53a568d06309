"""
Command-line interface for the collection loop benchmarks.
"""

from typing import List, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.benchmark_runner import BenchmarkRunner
from ..core.config import DEFAULT_SIZES, BenchmarkConfig
from ..core.system_info import SystemInfo

app = typer.Typer(
    help="Collection Loop Benchmark - loop, callback and pipeline styles for filtering lists"
)
console = Console()


def _build_config(
    sizes: List[int],
    warmup: int,
    warmup_time: float,
    iterations: int,
    iteration_time: float,
    time_unit: str,
    perf: bool,
) -> BenchmarkConfig:
    return BenchmarkConfig(
        warmup_iterations=warmup,
        warmup_time=warmup_time,
        measurement_iterations=iterations,
        measurement_time=iteration_time,
        sizes=list(sizes),
        time_unit=time_unit,
        profile_perf=perf,
    ).validate()


def _split_benchmark(benchmark: str) -> List[str]:
    if "/" not in benchmark:
        rprint(
            "[red]Benchmark must be in format category/name (e.g., collection/filter-even)[/red]"
        )
        raise typer.Exit(code=1)
    return benchmark.split("/", 1)


@app.command()
def system_info() -> None:
    """Display host information."""
    try:
        SystemInfo().print_system_info()
    except Exception as e:
        rprint(f"[red]Error getting system info: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def list_benchmarks(
    category: Optional[str] = typer.Option(
        None, "--category", "-c", help="Benchmark category to list"
    )
) -> None:
    """List available benchmarks and their variants."""
    try:
        runner = BenchmarkRunner()
        benchmarks = runner.list_benchmarks(category)

        if not benchmarks:
            rprint("[yellow]No benchmarks found[/yellow]")
            return

        table = Table(title="Available Benchmarks")
        table.add_column("Category", style="cyan")
        table.add_column("Benchmark", style="green")
        table.add_column("Variants", style="magenta")

        for cat, bench_list in benchmarks.items():
            for name in bench_list:
                table.add_row(cat, name, ", ".join(runner.list_variants(cat, name)))

        console.print(table)

    except Exception as e:
        rprint(f"[red]Error listing benchmarks: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def run(
    category: str = typer.Argument(..., help="Benchmark category to run"),
    benchmark: Optional[str] = typer.Option(
        None, "--benchmark", "-b", help="Specific benchmark to run"
    ),
    variants: Optional[List[str]] = typer.Option(
        None, "--variant", help="Variants to test (default: all)"
    ),
    sizes: List[int] = typer.Option(
        list(DEFAULT_SIZES), "--size", help="Input sizes to test"
    ),
    warmup: int = typer.Option(5, "--warmup", help="Number of warmup iterations"),
    warmup_time: float = typer.Option(
        0.2, "--warmup-time", help="Seconds per warmup iteration"
    ),
    iterations: int = typer.Option(
        5, "--iterations", help="Number of measurement iterations"
    ),
    iteration_time: float = typer.Option(
        1.0, "--iteration-time", help="Seconds per measurement iteration"
    ),
    time_unit: str = typer.Option("ns", "--unit", help="Output time unit (ns, us, ms)"),
    perf: bool = typer.Option(False, "--perf", help="Record perf hardware counters"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Run benchmarks for a specific category or benchmark."""
    try:
        config = _build_config(
            sizes, warmup, warmup_time, iterations, iteration_time, time_unit, perf
        )
        runner = BenchmarkRunner(config)

        if verbose:
            runner.get_system_info()

        if benchmark:
            rprint(f"[green]Running benchmark: {category}/{benchmark}[/green]")
            results = runner.run_benchmark(category, benchmark, variants or None)
        else:
            rprint(f"[green]Running all benchmarks in category: {category}[/green]")
            results = runner.run_category(category, variants or None)

        _report(runner, results)

    except Exception as e:
        rprint(f"[red]Error running benchmarks: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def run_all(
    sizes: List[int] = typer.Option(
        list(DEFAULT_SIZES), "--size", help="Input sizes to test"
    ),
    warmup: int = typer.Option(5, "--warmup", help="Number of warmup iterations"),
    warmup_time: float = typer.Option(
        0.2, "--warmup-time", help="Seconds per warmup iteration"
    ),
    iterations: int = typer.Option(
        5, "--iterations", help="Number of measurement iterations"
    ),
    iteration_time: float = typer.Option(
        1.0, "--iteration-time", help="Seconds per measurement iteration"
    ),
    time_unit: str = typer.Option("ns", "--unit", help="Output time unit (ns, us, ms)"),
    perf: bool = typer.Option(False, "--perf", help="Record perf hardware counters"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Run the full size x variant matrix of every benchmark."""
    try:
        config = _build_config(
            sizes, warmup, warmup_time, iterations, iteration_time, time_unit, perf
        )
        runner = BenchmarkRunner(config)

        if verbose:
            runner.get_system_info()

        rprint("[green]Running all benchmarks...[/green]")
        results = runner.run_all()
        _report(runner, results)

    except Exception as e:
        rprint(f"[red]Error running benchmarks: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def verify(
    benchmark: str = typer.Argument(
        "collection/filter-even", help="Benchmark to verify (format: category/name)"
    ),
    sizes: List[int] = typer.Option(
        list(DEFAULT_SIZES), "--size", help="Input sizes to check"
    ),
) -> None:
    """Check that every variant returns the same result for each size."""
    category, name = _split_benchmark(benchmark)
    try:
        runner = BenchmarkRunner(BenchmarkConfig(sizes=list(sizes)))
        verified = runner.verify_benchmark(category, name)

        table = Table(title=f"Verified {benchmark}")
        table.add_column("Size", style="cyan")
        table.add_column("Result length", style="green")
        table.add_column("Head", style="yellow")
        for size, expected in verified.items():
            table.add_row(str(size), str(len(expected)), escape(str(expected[:5])))
        console.print(table)

        rprint(f"[green]All variants agree for sizes {list(verified)}[/green]")

    except Exception as e:
        rprint(f"[red]Verification failed: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def compare(
    benchmark: str = typer.Argument(
        ..., help="Benchmark to compare (format: category/name)"
    ),
    variants: Optional[List[str]] = typer.Option(
        None, "--variant", help="Variants to compare (default: all)"
    ),
    sizes: List[int] = typer.Option(
        list(DEFAULT_SIZES), "--size", help="Input sizes to test"
    ),
    warmup: int = typer.Option(5, "--warmup", help="Number of warmup iterations"),
    warmup_time: float = typer.Option(
        0.2, "--warmup-time", help="Seconds per warmup iteration"
    ),
    iterations: int = typer.Option(
        5, "--iterations", help="Number of measurement iterations"
    ),
    iteration_time: float = typer.Option(
        1.0, "--iteration-time", help="Seconds per measurement iteration"
    ),
    baseline: str = typer.Option(
        "index_loop", "--baseline", help="Baseline variant for comparison"
    ),
    time_unit: str = typer.Option("ns", "--unit", help="Output time unit (ns, us, ms)"),
) -> None:
    """Compare the variants of a specific benchmark."""
    category, name = _split_benchmark(benchmark)
    try:
        config = _build_config(
            sizes, warmup, warmup_time, iterations, iteration_time, time_unit, False
        )
        runner = BenchmarkRunner(config)
        rprint(f"[green]Comparing {benchmark} across variants[/green]")

        results = runner.run_benchmark(category, name, variants or None)

        if results:
            runner.print_results()
            comparison = runner.compare_results(baseline)

            if comparison:
                rprint(f"\n[cyan]Speedup relative to {baseline}:[/cyan]")
                _print_comparison_table(comparison, config)
        else:
            rprint("[yellow]No results to display[/yellow]")

    except Exception as e:
        rprint(f"[red]Error comparing benchmarks: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def profile(
    benchmark: str = typer.Argument(
        ..., help="Benchmark to profile (format: category/name)"
    ),
    variant: str = typer.Argument(..., help="Variant to profile"),
    size: int = typer.Option(1000, "--size", help="Input size"),
    iteration_time: float = typer.Option(
        1.0, "--iteration-time", help="Seconds of measured calls"
    ),
) -> None:
    """Profile one variant with perf counters and allocation count."""
    category, name = _split_benchmark(benchmark)
    try:
        runner = BenchmarkRunner(BenchmarkConfig(measurement_time=iteration_time))
        rprint(f"[green]Profiling {variant} implementation of {benchmark}[/green]")

        runner.profile_benchmark(category, name, variant, size)

    except Exception as e:
        rprint(f"[red]Error profiling benchmark: {e}[/red]")
        raise typer.Exit(code=1)


def _report(runner: BenchmarkRunner, results) -> None:
    if not results:
        rprint("[yellow]No results to display[/yellow]")
        return

    runner.print_results()

    comparison = runner.compare_results()
    if comparison:
        rprint("\n[cyan]Performance Comparison:[/cyan]")
        _print_comparison_table(comparison, runner.config)


def _print_comparison_table(comparison: dict, config: BenchmarkConfig) -> None:
    """Print a formatted comparison table."""
    table = Table(title="Variant Comparison")
    table.add_column("Benchmark", style="cyan")
    table.add_column("Variant", style="green")
    table.add_column(f"Time ({config.time_unit}/op)", style="yellow")
    table.add_column("Speedup", style="magenta")
    table.add_column("ops/s", style="blue")
    table.add_column("Allocs", style="red")

    for bench_name, variants in comparison.items():
        for variant_name, metrics in variants.items():
            time_per_op = (
                f"{metrics['execution_time'] / config.unit_scale:.3f}"
                if metrics["execution_time"]
                else "N/A"
            )
            speedup = f"{metrics['speedup']:.2f}x" if metrics["speedup"] else "N/A"
            throughput = (
                f"{metrics['throughput']:,.0f}" if metrics["throughput"] else "N/A"
            )
            allocs = (
                str(metrics["allocations"])
                if metrics["allocations"] is not None
                else "N/A"
            )

            table.add_row(bench_name, variant_name, time_per_op, speedup, throughput, allocs)

    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
