"""Benchmark result models.

Covers scenario statistics and the report exported after a benchmark.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bootcache_core.benchmark.stats import aggregate_durations

UNCACHED_SCENARIO = "uncached"
CACHED_SCENARIO = "cached"
CURRENT_SCENARIO = "current"


class BenchmarkScenario(BaseModel):
    """Aggregated statistics of one named scenario.

    Build instances with from_durations(); the statistics are derived from
    the measured durations and never set independently.

    Attributes:
        name: Scenario label (e.g. "cached", "uncached", "current")
        runs: Number of measured runs
        average_ms: Arithmetic mean
        median_ms: Median
        p95_ms: Nearest-rank 95th percentile
        min_ms: Fastest run
        max_ms: Slowest run

    Example:
        >>> scenario = BenchmarkScenario.from_durations("current", [10.0, 20.0, 30.0, 40.0])
        >>> scenario.median_ms, scenario.p95_ms
        (25.0, 40.0)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Scenario name")
    runs: int = Field(..., ge=1, description="Measured runs")
    average_ms: float = Field(..., description="Average duration (ms)")
    median_ms: float = Field(..., description="Median duration (ms)")
    p95_ms: float = Field(..., description="p95 duration (ms)")
    min_ms: float = Field(..., description="Minimum duration (ms)")
    max_ms: float = Field(..., description="Maximum duration (ms)")

    @model_validator(mode="after")
    def _check_order(self) -> BenchmarkScenario:
        if not (self.min_ms <= self.median_ms <= self.max_ms):
            raise ValueError("expected min_ms <= median_ms <= max_ms")
        if not (self.min_ms <= self.p95_ms <= self.max_ms):
            raise ValueError("expected min_ms <= p95_ms <= max_ms")
        return self

    @classmethod
    def from_durations(cls, name: str, durations: Sequence[float]) -> BenchmarkScenario:
        """Aggregate measured durations into a scenario.

        Args:
            name: Scenario label.
            durations: Measured (not warmup) durations in milliseconds.

        Raises:
            ValueError: If ``durations`` is empty.
        """
        summary = aggregate_durations(durations)
        return cls(
            name=name,
            runs=summary.count,
            average_ms=summary.average_ms,
            median_ms=summary.median_ms,
            p95_ms=summary.p95_ms,
            min_ms=summary.min_ms,
            max_ms=summary.max_ms,
        )


class BenchmarkReport(BaseModel):
    """Everything a benchmark produced.

    Attributes:
        command: Benchmarked command, space-joined
        runs: Requested measured runs per scenario
        warmups: Requested warmup runs per scenario
        compare_cache: Whether cache-comparison mode was used
        scenarios: Scenarios in execution order
        improvement: Cached vs uncached improvement in percent (comparison only)
        generated_at: When the report was produced
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    command: str = Field(..., description="Benchmarked command")
    runs: int = Field(..., ge=1, description="Measured runs per scenario")
    warmups: int = Field(..., ge=0, description="Warmup runs per scenario")
    compare_cache: bool = Field(default=False, description="Cache comparison mode")
    scenarios: list[BenchmarkScenario] = Field(default_factory=list, description="Scenarios")
    improvement: float | None = Field(default=None, description="Improvement (%)")
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Report timestamp"
    )

    def to_export(self) -> dict[str, Any]:
        """Return the JSON export payload."""
        return {
            "generated_at": self.generated_at.isoformat(),
            "command": self.command,
            "runs": self.runs,
            "warmups": self.warmups,
            "compare_cache": self.compare_cache,
            "scenarios": [s.model_dump(mode="json") for s in self.scenarios],
        }
