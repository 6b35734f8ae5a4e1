"""bootcache-core: Startup cache warmup and benchmarking.

This package provides:
- WarmupRunner: Fingerprint-gated container compilation, validation,
  bytecode refresh, preload script and metrics
- BenchmarkHarness: Repeated-process startup latency measurement with
  optional cache comparison, thresholds and report export
- BootcacheConfig: Configuration loaded from bootcache.yaml and environment
"""

from __future__ import annotations

__version__ = "0.1.0"

from bootcache_core.benchmark import (
    BenchmarkHarness,
    BenchmarkReport,
    BenchmarkScenario,
    ThresholdConfig,
    calculate_improvement,
    enforce_thresholds,
    export_report,
    normalize_target_command,
)
from bootcache_core.config import (
    BenchmarkConfig,
    BootcacheConfig,
    BytecodeCacheMode,
    PathsConfig,
    WarmupConfig,
)
from bootcache_core.errors import (
    ArtifactInvalid,
    ArtifactMissing,
    BootcacheError,
    CompilerUnavailable,
    ConfigurationError,
    EncodingFailure,
    ProcessFailure,
    ProcessTimeout,
    SpawnError,
    ThresholdExceeded,
)
from bootcache_core.observability import configure_logging
from bootcache_core.process import ProcessResult, ProcessRunner
from bootcache_core.registry import ProviderRegistry, build_registry
from bootcache_core.warmup import (
    ArtifactValidator,
    ContainerContract,
    WarmupOutcome,
    WarmupRunner,
    WarmupStatus,
    clear_container_cache,
)

__all__ = [
    "__version__",
    # Errors
    "ArtifactInvalid",
    "ArtifactMissing",
    "BootcacheError",
    "CompilerUnavailable",
    "ConfigurationError",
    "EncodingFailure",
    "ProcessFailure",
    "ProcessTimeout",
    "SpawnError",
    "ThresholdExceeded",
    # Configuration
    "BenchmarkConfig",
    "BootcacheConfig",
    "BytecodeCacheMode",
    "PathsConfig",
    "WarmupConfig",
    # Warmup
    "ArtifactValidator",
    "ContainerContract",
    "WarmupOutcome",
    "WarmupRunner",
    "WarmupStatus",
    "clear_container_cache",
    # Benchmark
    "BenchmarkHarness",
    "BenchmarkReport",
    "BenchmarkScenario",
    "ThresholdConfig",
    "calculate_improvement",
    "enforce_thresholds",
    "export_report",
    "normalize_target_command",
    # Infrastructure
    "ProcessResult",
    "ProcessRunner",
    "ProviderRegistry",
    "build_registry",
    "configure_logging",
]
