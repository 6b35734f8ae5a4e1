"""Fingerprint gate: rebuild or keep the compiled artifact.

The gate compares the compiler's current fingerprint with the one recorded
for the existing artifact. Equal, non-empty fingerprints skip the compile.
Anything else, including a compiler that cannot report a fingerprint,
rebuilds.
"""

from __future__ import annotations

import hmac
from pathlib import Path

import structlog

from bootcache_core.warmup.contracts import Compiler, SupportsFingerprint
from bootcache_core.warmup.metadata import read_artifact_metadata
from bootcache_core.warmup.models import WarmupStatus

logger = structlog.get_logger(__name__)


def fingerprints_match(requested: str | None, existing: str | None) -> bool:
    """Constant-time comparison of two fingerprints.

    Args:
        requested: Fingerprint of the current binding graph.
        existing: Fingerprint recorded for the compiled artifact.

    Returns:
        True only if both are non-empty and equal.
    """
    if not requested or not existing:
        return False
    return hmac.compare_digest(requested.encode("utf-8"), existing.encode("utf-8"))


class FingerprintGate:
    """Decides whether the compiled artifact must be rebuilt.

    Attributes:
        compiler: External compiler collaborator

    Example:
        >>> gate = FingerprintGate(compiler)
        >>> status = gate.apply(Path("storage/cache/container.py"), gate.requested_fingerprint())
        >>> status
        <WarmupStatus.UP_TO_DATE: 'up_to_date'>
    """

    def __init__(self, compiler: Compiler) -> None:
        """Initialize the gate.

        Args:
            compiler: Compiler used for rebuilds and fingerprinting.
        """
        self.compiler = compiler
        self._log = logger.bind(component="fingerprint_gate")

    def requested_fingerprint(self) -> str | None:
        """Return the compiler's current fingerprint, if it can report one."""
        if not isinstance(self.compiler, SupportsFingerprint):
            return None
        fingerprint = self.compiler.fingerprint()
        return fingerprint if isinstance(fingerprint, str) and fingerprint else None

    def decide(self, cache_file: Path, requested: str | None) -> WarmupStatus:
        """Decide skip or rebuild without side effects.

        Args:
            cache_file: Compiled artifact path.
            requested: Current fingerprint, or None if unavailable.

        Returns:
            UP_TO_DATE to skip, COMPILED to rebuild.
        """
        metadata = read_artifact_metadata(cache_file)
        existing = metadata.fingerprint if metadata else None

        if fingerprints_match(requested, existing):
            self._log.info("artifact_up_to_date", cache_file=str(cache_file))
            return WarmupStatus.UP_TO_DATE

        self._log.info(
            "artifact_stale",
            cache_file=str(cache_file),
            has_requested=requested is not None,
            has_existing=existing is not None,
        )
        return WarmupStatus.COMPILED

    def apply(self, cache_file: Path, requested: str | None) -> WarmupStatus:
        """Decide and, when stale, delegate the rebuild to the compiler.

        Args:
            cache_file: Compiled artifact path.
            requested: Current fingerprint, or None if unavailable.

        Returns:
            The gate decision.
        """
        status = self.decide(cache_file, requested)
        if status is WarmupStatus.COMPILED:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            self.compiler.compile(cache_file)
            self._log.info("artifact_compiled", cache_file=str(cache_file))
        return status
