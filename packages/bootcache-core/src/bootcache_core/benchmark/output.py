"""Benchmark output formatters.

Rich table output for benchmark scenarios.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from bootcache_core.benchmark.models import BenchmarkReport, BenchmarkScenario

SUMMARY_COLUMNS = ("Scenario", "Runs", "Avg (ms)", "Median (ms)", "P95 (ms)", "Min (ms)", "Max (ms)")


def build_summary_table(scenarios: list[BenchmarkScenario]) -> Table:
    """Build the scenario summary table (two-decimal milliseconds)."""
    table = Table(show_header=True, header_style="bold")
    for column in SUMMARY_COLUMNS:
        table.add_column(column, justify="left" if column == "Scenario" else "right")

    for scenario in scenarios:
        table.add_row(
            scenario.name,
            str(scenario.runs),
            f"{scenario.average_ms:,.2f}",
            f"{scenario.median_ms:,.2f}",
            f"{scenario.p95_ms:,.2f}",
            f"{scenario.min_ms:,.2f}",
            f"{scenario.max_ms:,.2f}",
        )
    return table


def print_report(report: BenchmarkReport, console: Console | None = None) -> None:
    """Print the summary table of a report.

    Args:
        report: Benchmark report.
        console: Optional Rich console.
    """
    if console is None:
        console = Console()

    console.print()
    console.print(build_summary_table(report.scenarios))
