"""Startup benchmark module.

Measures process startup latency across repeated runs, compares cold and
warm cache states, gates on thresholds and exports reports.
"""

from __future__ import annotations

from bootcache_core.benchmark.command import normalize_target_command, parse_target_command
from bootcache_core.benchmark.export import export_report, format_csv
from bootcache_core.benchmark.harness import BenchmarkHarness
from bootcache_core.benchmark.models import BenchmarkReport, BenchmarkScenario
from bootcache_core.benchmark.output import build_summary_table, print_report
from bootcache_core.benchmark.stats import DurationSummary, aggregate_durations
from bootcache_core.benchmark.thresholds import (
    ThresholdConfig,
    calculate_improvement,
    enforce_thresholds,
    parse_optional_float,
)

__all__ = [
    "BenchmarkHarness",
    "BenchmarkReport",
    "BenchmarkScenario",
    "DurationSummary",
    "ThresholdConfig",
    "aggregate_durations",
    "build_summary_table",
    "calculate_improvement",
    "enforce_thresholds",
    "export_report",
    "format_csv",
    "normalize_target_command",
    "parse_optional_float",
    "parse_target_command",
    "print_report",
]
