"""Duration statistics.

Reduces a non-empty list of durations to average, median, p95, min and max.
The p95 is the nearest-rank element at ``ceil(0.95 * n) - 1`` of the sorted
list, clamped to the valid index range.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

P95_QUANTILE = 0.95


@dataclass(frozen=True)
class DurationSummary:
    """Summary statistics of a duration list, in milliseconds."""

    count: int
    average_ms: float
    median_ms: float
    p95_ms: float
    min_ms: float
    max_ms: float


def percentile_index(count: int, quantile: float = P95_QUANTILE) -> int:
    """Nearest-rank index of ``quantile`` in a sorted list of ``count`` items."""
    index = math.ceil(count * quantile) - 1
    return max(0, min(count - 1, index))


def aggregate_durations(durations: Sequence[float]) -> DurationSummary:
    """Summarize durations.

    Args:
        durations: At least one duration in milliseconds.

    Returns:
        DurationSummary over the sorted durations.

    Raises:
        ValueError: If ``durations`` is empty.

    Example:
        >>> aggregate_durations([40.0, 10.0, 30.0, 20.0]).median_ms
        25.0
    """
    if not durations:
        raise ValueError("cannot aggregate an empty duration list")

    ordered = sorted(float(d) for d in durations)
    count = len(ordered)
    middle = count // 2

    if count % 2 == 0:
        median = (ordered[middle - 1] + ordered[middle]) / 2
    else:
        median = ordered[middle]

    return DurationSummary(
        count=count,
        average_ms=sum(ordered) / count,
        median_ms=median,
        p95_ms=ordered[percentile_index(count)],
        min_ms=ordered[0],
        max_ms=ordered[-1],
    )
