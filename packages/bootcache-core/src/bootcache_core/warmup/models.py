"""Warmup data models.

ArtifactMetadata describes a compiled artifact as reported by its sidecar.
WarmupOutcome is the immutable record of one warmup invocation; it is
persisted to the metrics file and superseded by the next warmup.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WarmupStatus(str, Enum):
    """Result of the fingerprint gate.

    Attributes:
        COMPILED: The artifact was rebuilt
        UP_TO_DATE: The existing artifact matched and was kept
    """

    COMPILED = "compiled"
    UP_TO_DATE = "up_to_date"


class ArtifactMetadata(BaseModel):
    """Metadata embedded alongside a compiled artifact.

    Every field is optional because the sidecar is written by an external
    compiler and may be partial.

    Attributes:
        fingerprint: Content hash of the binding graph
        generated_at: When the artifact was generated
        total_bindings: Number of bindings in the graph
        optimized_bindings: Bindings compiled to direct factories
        optimized_classes: Classes compiled ahead of time
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    fingerprint: str | None = Field(default=None, description="Binding graph hash")
    generated_at: str | None = Field(default=None, description="Generation timestamp")
    total_bindings: int = Field(default=0, ge=0, description="Total bindings")
    optimized_bindings: int = Field(default=0, ge=0, description="Optimized bindings")
    optimized_classes: int = Field(default=0, ge=0, description="Optimized classes")

    @model_validator(mode="after")
    def _check_bindings(self) -> ArtifactMetadata:
        if self.optimized_bindings > self.total_bindings:
            raise ValueError("optimized_bindings cannot exceed total_bindings")
        return self


class WarmupOutcome(BaseModel):
    """Immutable record of one warmup invocation.

    Attributes:
        status: compiled or up_to_date
        cache_file: Compiled artifact path
        preload_file: Preload script path
        fingerprint: Fingerprint embedded in the artifact, else the requested one
        total_bindings: Bindings reported by the artifact metadata
        optimized_bindings: Optimized bindings reported by the metadata
        optimized_classes: Optimized classes reported by the metadata
        warmup_duration_ms: Wall clock of the whole warmup
        generated_at: When the outcome was recorded

    Example:
        >>> outcome = WarmupOutcome.from_metadata(
        ...     status=WarmupStatus.COMPILED,
        ...     cache_file="storage/cache/container.py",
        ...     preload_file="storage/cache/preload.py",
        ...     metadata=ArtifactMetadata(total_bindings=4, optimized_bindings=3),
        ...     requested_fingerprint="abc",
        ...     warmup_duration_ms=12.5,
        ... )
        >>> outcome.compile_hit_rate
        75.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: WarmupStatus = Field(..., description="Gate decision")
    cache_file: str = Field(..., description="Compiled artifact path")
    preload_file: str = Field(..., description="Preload script path")
    fingerprint: str | None = Field(default=None, description="Effective fingerprint")
    total_bindings: int = Field(default=0, ge=0, description="Total bindings")
    optimized_bindings: int = Field(default=0, ge=0, description="Optimized bindings")
    optimized_classes: int = Field(default=0, ge=0, description="Optimized classes")
    warmup_duration_ms: float = Field(default=0.0, ge=0.0, description="Warmup duration")
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Record timestamp"
    )

    @classmethod
    def from_metadata(
        cls,
        *,
        status: WarmupStatus,
        cache_file: str,
        preload_file: str,
        metadata: ArtifactMetadata | None,
        requested_fingerprint: str | None,
        warmup_duration_ms: float,
    ) -> WarmupOutcome:
        """Build an outcome from the artifact metadata read after the build."""
        metadata = metadata or ArtifactMetadata()
        return cls(
            status=status,
            cache_file=cache_file,
            preload_file=preload_file,
            fingerprint=metadata.fingerprint or requested_fingerprint,
            total_bindings=metadata.total_bindings,
            optimized_bindings=metadata.optimized_bindings,
            optimized_classes=metadata.optimized_classes,
            warmup_duration_ms=warmup_duration_ms,
        )

    @property
    def fallback_bindings(self) -> int:
        """Bindings resolved at runtime instead of compiled."""
        return max(0, self.total_bindings - self.optimized_bindings)

    @property
    def compile_hit_rate(self) -> float:
        """Percentage of bindings compiled ahead of time (0.0 without bindings)."""
        if self.total_bindings <= 0:
            return 0.0
        return self.optimized_bindings / self.total_bindings * 100

    @property
    def fallback_rate(self) -> float:
        """Percentage of fallback bindings, computed from fallback_bindings."""
        if self.total_bindings <= 0:
            return 0.0
        return self.fallback_bindings / self.total_bindings * 100

    def to_metrics(self) -> dict[str, Any]:
        """Return the metrics file payload."""
        return {
            "generated_at": self.generated_at.isoformat(),
            "status": self.status.value,
            "cache_file": self.cache_file,
            "preload_file": self.preload_file,
            "fingerprint": self.fingerprint,
            "total_bindings": self.total_bindings,
            "optimized_bindings": self.optimized_bindings,
            "optimized_classes": self.optimized_classes,
            "fallback_bindings": self.fallback_bindings,
            "compile_hit_rate": round(self.compile_hit_rate, 4),
            "fallback_rate": round(self.fallback_rate, 4),
            "warmup_duration_ms": round(self.warmup_duration_ms, 4),
        }
