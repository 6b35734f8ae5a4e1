"""Container warmup module.

Decides whether the compiled container is stale, rebuilds and validates it,
primes the bytecode cache and records warmup metrics.
"""

from __future__ import annotations

from bootcache_core.warmup.bytecode import (
    BytecodeCache,
    NullBytecodeCache,
    PycBytecodeCache,
    create_bytecode_cache,
)
from bootcache_core.warmup.clear import clear_container_cache
from bootcache_core.warmup.contracts import Compiler, ContainerContract, SupportsFingerprint
from bootcache_core.warmup.gate import FingerprintGate, fingerprints_match
from bootcache_core.warmup.metadata import read_artifact_metadata, write_artifact_metadata
from bootcache_core.warmup.metrics import MetricsEmitter
from bootcache_core.warmup.models import ArtifactMetadata, WarmupOutcome, WarmupStatus
from bootcache_core.warmup.preload import write_preload_script
from bootcache_core.warmup.runner import WarmupRunner
from bootcache_core.warmup.validator import ArtifactValidator

__all__ = [
    "ArtifactMetadata",
    "ArtifactValidator",
    "BytecodeCache",
    "Compiler",
    "ContainerContract",
    "FingerprintGate",
    "MetricsEmitter",
    "NullBytecodeCache",
    "PycBytecodeCache",
    "SupportsFingerprint",
    "WarmupOutcome",
    "WarmupRunner",
    "WarmupStatus",
    "clear_container_cache",
    "create_bytecode_cache",
    "fingerprints_match",
    "read_artifact_metadata",
    "write_artifact_metadata",
    "write_preload_script",
]
