"""Narrow contracts between warmup and the dependency-injection compiler.

The compiler itself is external. Warmup only needs ``compile(target_path)``
and, optionally, ``fingerprint()``. The compiled artifact must define a class
extending ContainerContract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Compiler(Protocol):
    """Writes a compiled container artifact to a target path.

    Implementations are also expected to write the metadata sidecar next to
    the artifact (see bootcache_core.warmup.metadata.write_artifact_metadata).
    """

    def compile(self, target_path: Path) -> None:
        """Compile the current binding graph to ``target_path``."""
        ...


@runtime_checkable
class SupportsFingerprint(Protocol):
    """Compiler capability: report a content hash of the current binding graph."""

    def fingerprint(self) -> str | None:
        """Return the current fingerprint, or None when it cannot be computed."""
        ...


class ContainerContract(ABC):
    """Base class every compiled container must extend.

    Example:
        >>> class CompiledContainer(ContainerContract):
        ...     def has(self, key: str) -> bool:
        ...         return key in {"db"}
        ...     def get(self, key: str) -> Any:
        ...         return object()
    """

    @abstractmethod
    def has(self, key: str) -> bool:
        """Check whether a binding exists."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Resolve a binding."""
