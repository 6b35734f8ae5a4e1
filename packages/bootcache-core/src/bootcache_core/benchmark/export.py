"""Benchmark report export.

``.json`` writes the full report with run metadata; ``.csv`` writes one row
per scenario with six-decimal numerics. Any other extension is rejected.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from bootcache_core.errors import ConfigurationError, EncodingFailure
from bootcache_core.fileio import encode_json, write_locked

if TYPE_CHECKING:
    from bootcache_core.benchmark.models import BenchmarkReport, BenchmarkScenario

logger = structlog.get_logger(__name__)

CSV_HEADER = ("scenario", "runs", "average_ms", "median_ms", "p95_ms", "min_ms", "max_ms")


def format_csv(scenarios: list[BenchmarkScenario]) -> str:
    """Render scenarios as CSV text.

    Example:
        >>> print(format_csv([scenario]), end="")
        scenario,runs,average_ms,median_ms,p95_ms,min_ms,max_ms
        current,3,10.123456,10.000000,12.000000,8.000000,12.000000
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for scenario in scenarios:
        writer.writerow(
            [
                scenario.name,
                str(scenario.runs),
                f"{scenario.average_ms:.6f}",
                f"{scenario.median_ms:.6f}",
                f"{scenario.p95_ms:.6f}",
                f"{scenario.min_ms:.6f}",
                f"{scenario.max_ms:.6f}",
            ]
        )
    return buffer.getvalue()


def export_report(report: BenchmarkReport, destination: Path) -> Path:
    """Write ``report`` to ``destination``.

    The destination directory is created if needed.

    Args:
        report: Benchmark report.
        destination: Absolute target path ending in .json or .csv.

    Returns:
        The written path.

    Raises:
        ConfigurationError: If the extension is unsupported.
        EncodingFailure: If the report cannot be encoded or written.
    """
    extension = destination.suffix.lower()
    if extension == ".json":
        content = encode_json(report.to_export())
    elif extension == ".csv":
        content = format_csv(report.scenarios)
    else:
        raise ConfigurationError(
            "Unsupported output format. Use a .json or .csv file extension.",
            field_path="output",
        )

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        write_locked(destination, content)
    except OSError as e:
        raise EncodingFailure(
            f"Unable to write benchmark output to {destination}",
            internal_details=f"{type(e).__name__}: {e}",
        ) from e

    logger.info("report_exported", destination=str(destination), format=extension.lstrip("."))
    return destination
