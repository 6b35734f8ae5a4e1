"""Benchmark threshold gate.

Operators may bound the average and p95 of every scenario and, in
cache-comparison mode, require a minimum improvement. A value equal to a
limit passes; only exceeding it fails.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from bootcache_core.errors import ConfigurationError, ThresholdExceeded

if TYPE_CHECKING:
    from bootcache_core.benchmark.models import BenchmarkScenario


class ThresholdConfig(BaseModel):
    """Optional pass/fail limits.

    Attributes:
        min_improvement: Minimum cached-vs-uncached improvement (%)
        max_average_ms: Maximum average of any scenario
        max_p95_ms: Maximum p95 of any scenario
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_improvement: float | None = Field(default=None, description="Minimum improvement (%)")
    max_average_ms: float | None = Field(default=None, description="Maximum average (ms)")
    max_p95_ms: float | None = Field(default=None, description="Maximum p95 (ms)")


def calculate_improvement(baseline_ms: float, optimized_ms: float) -> float:
    """Percentage improvement of ``optimized_ms`` over ``baseline_ms``.

    Returns 0.0 when the baseline is not positive.

    Example:
        >>> calculate_improvement(100.0, 60.0)
        40.0
    """
    if baseline_ms <= 0.0:
        return 0.0
    return (baseline_ms - optimized_ms) / baseline_ms * 100


def parse_optional_float(value: str | float | None, option: str = "threshold") -> float | None:
    """Parse a numeric option that may be omitted.

    Args:
        value: Raw option value.
        option: Option name used in the error.

    Returns:
        The float, or None for a missing or blank value.

    Raises:
        ConfigurationError: If the value is not numeric.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not value.strip():
        return None
    try:
        parsed = float(value)
    except ValueError:
        parsed = math.nan
    if not math.isfinite(parsed):
        raise ConfigurationError(
            "Benchmark threshold options must be numeric.",
            field_path=option,
            internal_details=f"{option}={value!r}",
        )
    return parsed


def find_scenario(scenarios: list[BenchmarkScenario], name: str) -> BenchmarkScenario:
    """Return the scenario called ``name``.

    Raises:
        ConfigurationError: If no such scenario was produced.
    """
    for scenario in scenarios:
        if scenario.name == name:
            return scenario
    raise ConfigurationError(f"Required benchmark scenario [{name}] was not produced.")


def enforce_thresholds(
    scenarios: list[BenchmarkScenario],
    thresholds: ThresholdConfig,
    compare_cache: bool,
) -> None:
    """Check every configured threshold.

    Args:
        scenarios: Produced scenarios.
        thresholds: Limits to enforce.
        compare_cache: Whether cache-comparison mode was used.

    Raises:
        ThresholdExceeded: If any limit is violated.
        ConfigurationError: If the improvement check cannot be evaluated.
    """
    if thresholds.max_average_ms is not None:
        for scenario in scenarios:
            if scenario.average_ms > thresholds.max_average_ms:
                raise ThresholdExceeded(
                    f"Benchmark threshold failed: max average {thresholds.max_average_ms:.2f}ms "
                    f'exceeded by "{scenario.name}" at {scenario.average_ms:.2f}ms.'
                )

    if thresholds.max_p95_ms is not None:
        for scenario in scenarios:
            if scenario.p95_ms > thresholds.max_p95_ms:
                raise ThresholdExceeded(
                    f"Benchmark threshold failed: max p95 {thresholds.max_p95_ms:.2f}ms "
                    f'exceeded by "{scenario.name}" at {scenario.p95_ms:.2f}ms.'
                )

    if thresholds.min_improvement is not None:
        if not compare_cache:
            raise ConfigurationError(
                "Minimum improvement threshold requires --compare-cache mode.",
                field_path="min_improvement",
            )

        uncached = find_scenario(scenarios, "uncached")
        cached = find_scenario(scenarios, "cached")
        improvement = calculate_improvement(uncached.average_ms, cached.average_ms)

        if improvement < thresholds.min_improvement:
            raise ThresholdExceeded(
                f"Benchmark threshold failed: minimum improvement "
                f"{thresholds.min_improvement:.2f}% not met (got {improvement:.2f}%)."
            )
