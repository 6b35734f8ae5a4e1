"""Startup benchmark harness.

Runs the target program in fresh processes, ``W`` discarded warmups followed
by ``R`` measured runs per scenario, strictly one process at a time. Any
non-zero exit aborts the scenario immediately; nothing is retried.

Two modes:
- single-scenario: benchmark the current on-disk cache state as "current"
- cache-comparison: clear caches, benchmark "uncached", rebuild caches,
  benchmark "cached", report the average improvement
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from bootcache_core.benchmark.models import (
    CACHED_SCENARIO,
    CURRENT_SCENARIO,
    UNCACHED_SCENARIO,
    BenchmarkReport,
    BenchmarkScenario,
)
from bootcache_core.benchmark.thresholds import calculate_improvement
from bootcache_core.config import BUILD_STEPS, CLEAR_STEPS
from bootcache_core.errors import ConfigurationError, ProcessFailure
from bootcache_core.process import ProcessRunner

logger = structlog.get_logger(__name__)

ScenarioListener = Callable[[str], None]


class BenchmarkHarness:
    """Measures process startup latency of a console entry script.

    Attributes:
        runner: Process runner
        entry_script: Program invoked by the interpreter
        working_dir: Working directory of every child
        interpreter: Interpreter executable

    Example:
        >>> harness = BenchmarkHarness(ProcessRunner(), Path("console.py"), Path("."))
        >>> report = harness.run_single(["--help"], warmups=3, runs=20)
        >>> report.scenarios[0].name
        'current'
    """

    def __init__(
        self,
        runner: ProcessRunner,
        entry_script: Path,
        working_dir: Path,
        interpreter: str | None = None,
    ) -> None:
        """Initialize the harness.

        Args:
            runner: Process runner used for every child.
            entry_script: Program invoked by the interpreter.
            working_dir: Working directory of every child.
            interpreter: Interpreter executable (default: sys.executable).
        """
        self.runner = runner
        self.entry_script = entry_script
        self.working_dir = working_dir
        self.interpreter = interpreter or sys.executable or "python"
        self._log = logger.bind(component="benchmark_harness")

    def argv_for(self, args: Sequence[str]) -> list[str]:
        """Build ``[interpreter, entry_script, *args]``."""
        return [self.interpreter, str(self.entry_script), *args]

    def run_scenario(
        self,
        name: str,
        command: Sequence[str],
        warmups: int,
        runs: int,
    ) -> BenchmarkScenario:
        """Benchmark one scenario.

        Args:
            name: Scenario label.
            command: Arguments passed to the entry script.
            warmups: Discarded runs executed first.
            runs: Measured runs (at least 1).

        Returns:
            Aggregated scenario statistics.

        Raises:
            ConfigurationError: If ``runs`` is less than 1.
            ProcessFailure: On the first non-zero exit.
            SpawnError: If a process cannot be started.
        """
        if runs < 1:
            raise ConfigurationError("At least one measured run is required.", field_path="runs")

        argv = self.argv_for(command)
        self._log.info("scenario_started", scenario=name, warmups=warmups, runs=runs)

        for _ in range(warmups):
            result = self.runner.run(argv, cwd=self.working_dir)
            if not result.succeeded:
                raise ProcessFailure(
                    f'Warmup run failed for scenario "{name}": {result.failure_output()}',
                    result=result,
                )

        durations: list[float] = []
        for index in range(1, runs + 1):
            result = self.runner.run(argv, cwd=self.working_dir)
            if not result.succeeded:
                raise ProcessFailure(
                    f'Run {index} failed for scenario "{name}": {result.failure_output()}',
                    result=result,
                )
            durations.append(result.duration_ms)

        scenario = BenchmarkScenario.from_durations(name, durations)
        self._log.info(
            "scenario_completed",
            scenario=name,
            runs=scenario.runs,
            average_ms=round(scenario.average_ms, 3),
            p95_ms=round(scenario.p95_ms, 3),
        )
        return scenario

    def run_maintenance(self, steps: Sequence[str]) -> None:
        """Run maintenance subcommands in order.

        Raises:
            ProcessFailure: On the first step exiting non-zero.
        """
        for step in steps:
            self._log.info("maintenance_step", step=step)
            result = self.runner.run(self.argv_for([step]), cwd=self.working_dir)
            if not result.succeeded:
                raise ProcessFailure(
                    f'Failed while running "{step}": {result.failure_output()}',
                    result=result,
                )

    def run_single(
        self,
        command: Sequence[str],
        warmups: int,
        runs: int,
    ) -> BenchmarkReport:
        """Benchmark the current on-disk state as scenario "current"."""
        scenario = self.run_scenario(CURRENT_SCENARIO, command, warmups, runs)
        return BenchmarkReport(
            command=" ".join(command),
            runs=runs,
            warmups=warmups,
            compare_cache=False,
            scenarios=[scenario],
        )

    def run_comparison(
        self,
        command: Sequence[str],
        warmups: int,
        runs: int,
        *,
        clear_steps: Sequence[str] = CLEAR_STEPS,
        build_steps: Sequence[str] = BUILD_STEPS,
        on_scenario: ScenarioListener | None = None,
    ) -> BenchmarkReport:
        """Benchmark with caches cleared, then with caches rebuilt.

        Args:
            command: Arguments passed to the entry script.
            warmups: Warmup runs per scenario.
            runs: Measured runs per scenario.
            clear_steps: Subcommands forcing a cold state.
            build_steps: Subcommands forcing a warm state.
            on_scenario: Called with each scenario name before it starts.

        Returns:
            Report with "uncached" and "cached" scenarios and the improvement.
        """
        if on_scenario:
            on_scenario(UNCACHED_SCENARIO)
        self.run_maintenance(clear_steps)
        uncached = self.run_scenario(UNCACHED_SCENARIO, command, warmups, runs)

        if on_scenario:
            on_scenario(CACHED_SCENARIO)
        self.run_maintenance(build_steps)
        cached = self.run_scenario(CACHED_SCENARIO, command, warmups, runs)

        improvement = calculate_improvement(uncached.average_ms, cached.average_ms)
        self._log.info("comparison_completed", improvement=round(improvement, 4))

        return BenchmarkReport(
            command=" ".join(command),
            runs=runs,
            warmups=warmups,
            compare_cache=True,
            scenarios=[uncached, cached],
            improvement=improvement,
        )
