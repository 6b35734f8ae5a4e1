"""Container warmup orchestration.

One warmup: ask the gate whether the artifact is stale, compile if so,
validate what is on disk, refresh the bytecode cache, rewrite the preload
script and record metrics. Duration covers the whole sequence.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from bootcache_core.warmup.bytecode import create_bytecode_cache, refresh
from bootcache_core.warmup.gate import FingerprintGate
from bootcache_core.warmup.metadata import read_artifact_metadata
from bootcache_core.warmup.metrics import MetricsEmitter
from bootcache_core.warmup.models import WarmupOutcome
from bootcache_core.warmup.preload import write_preload_script
from bootcache_core.warmup.validator import ArtifactValidator

if TYPE_CHECKING:
    from bootcache_core.config import PathsConfig
    from bootcache_core.warmup.bytecode import BytecodeCache
    from bootcache_core.warmup.contracts import Compiler

logger = structlog.get_logger(__name__)


class WarmupRunner:
    """Builds, validates and instruments the compiled container.

    Attributes:
        paths: Cache layout
        gate: Fingerprint gate wrapping the compiler
        validator: Artifact validator
        bytecode_cache: Advisory bytecode cache
        metrics: Metrics emitter

    Example:
        >>> runner = WarmupRunner(compiler, PathsConfig())
        >>> outcome = runner.run()
        >>> outcome.status.value
        'compiled'
    """

    def __init__(
        self,
        compiler: Compiler,
        paths: PathsConfig,
        *,
        validator: ArtifactValidator | None = None,
        bytecode_cache: BytecodeCache | None = None,
        metrics: MetricsEmitter | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            compiler: External compiler collaborator.
            paths: Cache layout.
            validator: Artifact validator (default: CompiledContainer).
            bytecode_cache: Bytecode cache (default: selected automatically).
            metrics: Metrics emitter (default: paths.metrics_file).
        """
        self.paths = paths
        self.gate = FingerprintGate(compiler)
        self.validator = validator or ArtifactValidator()
        self.bytecode_cache = bytecode_cache or create_bytecode_cache()
        self.metrics = metrics or MetricsEmitter(paths.metrics_file)
        self._log = logger.bind(component="warmup_runner")

    def run(self) -> WarmupOutcome:
        """Run one warmup.

        Returns:
            The recorded WarmupOutcome.

        Raises:
            ArtifactMissing: If the compiler did not produce the artifact.
            ArtifactInvalid: If the artifact has the wrong shape.
            Exception: Whatever the compiler raises while compiling.
        """
        cache_file = self.paths.container_cache_file
        start = time.perf_counter()
        requested = self.gate.requested_fingerprint()

        self._log.info("warmup_started", cache_file=str(cache_file))

        status = self.gate.apply(cache_file, requested)
        self.validator.validate(cache_file)
        refresh(self.bytecode_cache, cache_file)

        preload_file = write_preload_script(cache_file.parent)
        refresh(self.bytecode_cache, preload_file)

        metadata = read_artifact_metadata(cache_file)
        duration_ms = (time.perf_counter() - start) * 1000

        outcome = WarmupOutcome.from_metadata(
            status=status,
            cache_file=str(cache_file),
            preload_file=str(preload_file),
            metadata=metadata,
            requested_fingerprint=requested,
            warmup_duration_ms=duration_ms,
        )
        self.metrics.emit(outcome)

        self._log.info(
            "warmup_completed",
            status=status.value,
            duration_ms=round(duration_ms, 3),
            compile_hit_rate=round(outcome.compile_hit_rate, 4),
        )
        return outcome
