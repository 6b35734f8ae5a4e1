"""Warmup metrics side file.

The metrics file records the latest warmup next to the compiled artifact.
Writing it is best effort: an encoding or I/O failure is logged and the
warmup still succeeds, just without metrics.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from bootcache_core.errors import EncodingFailure
from bootcache_core.fileio import encode_json, write_locked
from bootcache_core.warmup.models import WarmupOutcome

logger = structlog.get_logger(__name__)


class MetricsEmitter:
    """Persists WarmupOutcome records.

    Attributes:
        metrics_file: Destination of the metrics document

    Example:
        >>> emitter = MetricsEmitter(Path("storage/cache/container-metrics.json"))
        >>> emitter.emit(outcome)
        PosixPath('storage/cache/container-metrics.json')
    """

    def __init__(self, metrics_file: Path) -> None:
        """Initialize the emitter.

        Args:
            metrics_file: Destination of the metrics document.
        """
        self.metrics_file = metrics_file
        self._log = logger.bind(component="metrics_emitter")

    def emit(self, outcome: WarmupOutcome) -> Path | None:
        """Write the outcome, replacing any previous metrics.

        Args:
            outcome: Warmup outcome to persist.

        Returns:
            The metrics path, or None if the metrics could not be written.
        """
        try:
            content = encode_json(outcome.to_metrics())
            self.metrics_file.parent.mkdir(parents=True, exist_ok=True)
            write_locked(self.metrics_file, content)
        except (EncodingFailure, OSError) as e:
            self._log.warning(
                "metrics_write_failed",
                metrics_file=str(self.metrics_file),
                error_type=type(e).__name__,
                error=str(e),
            )
            return None

        self._log.info("metrics_written", metrics_file=str(self.metrics_file))
        return self.metrics_file
