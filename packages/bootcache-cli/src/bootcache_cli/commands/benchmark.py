"""bootcache benchmark command - Measure process startup latency.

Runs the target command through the console entry script in fresh
processes, optionally comparing cleared and rebuilt caches, then prints a
summary, exports a report and enforces thresholds (in that order).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import click

from bootcache_cli.errors import fail
from bootcache_cli.output import comment, get_console, info, success

if TYPE_CHECKING:
    from bootcache_core.benchmark import BenchmarkReport
    from bootcache_core.config import BenchmarkConfig, BootcacheConfig


@dataclass
class BenchmarkOptions:
    """Grouped benchmark CLI options. None means "use the configured value"."""

    runs: int | None
    warmups: int | None
    command: str | None
    entry: str | None
    compare_cache: bool
    min_improvement: str | None
    max_average_ms: str | None
    max_p95_ms: str | None
    output: str | None
    timeout: float | None
    config_file: str | None


def _merge_options(base: BenchmarkConfig, opts: BenchmarkOptions) -> BenchmarkConfig:
    """Overlay CLI options on the configured benchmark defaults.

    Run counts are clamped (runs to at least 1, warmups to at least 0) and
    threshold strings parsed before anything is spawned.

    Raises:
        ConfigurationError: If a threshold is not numeric or the merged
            configuration is invalid.
    """
    from pydantic import ValidationError as PydanticValidationError

    from bootcache_core.benchmark.thresholds import parse_optional_float
    from bootcache_core.config import BenchmarkConfig, format_validation_error
    from bootcache_core.errors import ConfigurationError

    updates: dict[str, Any] = {}
    if opts.runs is not None:
        updates["runs"] = max(1, opts.runs)
    if opts.warmups is not None:
        updates["warmups"] = max(0, opts.warmups)
    if opts.command is not None:
        updates["command"] = opts.command
    if opts.entry is not None:
        updates["entry"] = opts.entry
    if opts.compare_cache:
        updates["compare_cache"] = True
    if opts.output is not None:
        updates["output"] = opts.output
    if opts.timeout is not None:
        updates["timeout_seconds"] = opts.timeout

    for field, raw in (
        ("min_improvement", opts.min_improvement),
        ("max_average_ms", opts.max_average_ms),
        ("max_p95_ms", opts.max_p95_ms),
    ):
        if raw is not None:
            updates[field] = parse_optional_float(raw, field)

    try:
        return BenchmarkConfig.model_validate({**base.model_dump(), **updates})
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid benchmark options:\n{format_validation_error(e)}"
        ) from None


def _run(config: BootcacheConfig, bench: BenchmarkConfig) -> BenchmarkReport:
    """Validate, run the harness and return its report."""
    from bootcache_core.benchmark import BenchmarkHarness, parse_target_command
    from bootcache_core.process import ProcessRunner

    bench.validate_for_run()
    command = parse_target_command(bench.command, bench.entry)

    paths = config.paths
    harness = BenchmarkHarness(
        ProcessRunner(timeout_seconds=bench.timeout_seconds),
        entry_script=paths.resolve(bench.entry),
        working_dir=paths.base_path,
    )

    info(f"Benchmarking: {' '.join(command)}")
    comment(f"{bench.warmups} warmup run(s), {bench.runs} measured run(s) per scenario")

    if not bench.compare_cache:
        return harness.run_single(command, bench.warmups, bench.runs)

    return harness.run_comparison(
        command,
        bench.warmups,
        bench.runs,
        clear_steps=bench.clear_steps,
        build_steps=bench.build_steps,
        on_scenario=lambda name: comment(f"Running {name} scenario..."),
    )


def _run_benchmark(opts: BenchmarkOptions) -> None:
    """Execute the benchmark end to end.

    Raises:
        CLIError: With exit code 1 on any validation, process, export or
            threshold failure.
    """
    from bootcache_core.benchmark import ThresholdConfig, enforce_thresholds, export_report
    from bootcache_core.benchmark.output import print_report
    from bootcache_core.config import BootcacheConfig
    from bootcache_core.errors import BootcacheError

    try:
        config = BootcacheConfig.load(opts.config_file)
        bench = _merge_options(config.benchmark, opts)
        report = _run(config, bench)

        print_report(report, console=get_console())
        if report.improvement is not None:
            info(f"Improvement: {report.improvement:.2f}%")

        # Exported before the gate so a failing threshold still leaves a report
        if bench.output:
            destination = export_report(report, config.paths.resolve(bench.output))
            success(f"Benchmark report written to {destination}")

        enforce_thresholds(
            report.scenarios,
            ThresholdConfig(
                min_improvement=bench.min_improvement,
                max_average_ms=bench.max_average_ms,
                max_p95_ms=bench.max_p95_ms,
            ),
            compare_cache=bench.compare_cache,
        )
    except BootcacheError as e:
        fail(e.user_message)

    success("Benchmark completed")


@click.command("benchmark")
@click.option(
    "--runs",
    type=int,
    default=None,
    help="Measured runs per scenario [default: 20]",
)
@click.option(
    "--warmups",
    type=int,
    default=None,
    help="Discarded warmup runs per scenario [default: 3]",
)
@click.option(
    "--command",
    "target_command",
    type=str,
    default=None,
    help="Command to benchmark, with or without the interpreter/entry prefix [default: --help]",
)
@click.option(
    "--entry",
    type=str,
    default=None,
    help="Console entry script, relative to the base path [default: console.py]",
)
@click.option(
    "--compare-cache",
    is_flag=True,
    default=False,
    help="Benchmark with caches cleared, then rebuilt, and report the improvement",
)
@click.option(
    "--min-improvement",
    type=str,
    default=None,
    help="Fail unless cached startup improves by at least this percentage",
)
@click.option(
    "--max-average-ms",
    type=str,
    default=None,
    help="Fail if any scenario's average exceeds this many milliseconds",
)
@click.option(
    "--max-p95-ms",
    type=str,
    default=None,
    help="Fail if any scenario's p95 exceeds this many milliseconds",
)
@click.option(
    "-o",
    "--output",
    type=str,
    default=None,
    help="Write a .json or .csv report to this path",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Kill a benchmarked process after this many seconds [default: no timeout]",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to bootcache.yaml [default: <base path>/bootcache.yaml]",
)
def benchmark(
    runs: int | None,
    warmups: int | None,
    target_command: str | None,
    entry: str | None,
    compare_cache: bool,
    min_improvement: str | None,
    max_average_ms: str | None,
    max_p95_ms: str | None,
    output: str | None,
    timeout: float | None,
    config_file: str | None,
) -> None:
    """Benchmark process startup latency.

    Examples:

        bootcache benchmark --runs 30 --warmups 5

        bootcache benchmark --compare-cache --min-improvement 20

        bootcache benchmark --command "python console.py routes" -o build/bench.csv
    """
    _run_benchmark(
        BenchmarkOptions(
            runs=runs,
            warmups=warmups,
            command=target_command,
            entry=entry,
            compare_cache=compare_cache,
            min_improvement=min_improvement,
            max_average_ms=max_average_ms,
            max_p95_ms=max_p95_ms,
            output=output,
            timeout=timeout,
            config_file=config_file,
        )
    )
