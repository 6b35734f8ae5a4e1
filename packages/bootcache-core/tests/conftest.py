"""Shared pytest fixtures for bootcache-core tests.

Provides structlog capture, a cache layout rooted in tmp_path and fake
compilers that write real artifacts and metadata sidecars.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

from bootcache_core.config import PathsConfig
from bootcache_core.warmup.metadata import write_artifact_metadata
from bootcache_core.warmup.models import ArtifactMetadata

CONTAINER_SOURCE = '''\
from bootcache_core.warmup.contracts import ContainerContract


class CompiledContainer(ContainerContract):
    def has(self, key):
        return key == "db"

    def get(self, key):
        return {"db": "sqlite"}[key]
'''


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture
def paths(tmp_path: Path) -> PathsConfig:
    """Cache layout rooted in a temporary base path."""
    return PathsConfig(base_path=tmp_path)


class FakeCompiler:
    """Compiler writing a fixed artifact and sidecar, recording each compile."""

    def __init__(
        self,
        fingerprint: str | None = "fp-1",
        source: str = CONTAINER_SOURCE,
        metadata: ArtifactMetadata | None = None,
    ) -> None:
        self._fingerprint = fingerprint
        self.source = source
        self.metadata = metadata or ArtifactMetadata(
            fingerprint=fingerprint,
            generated_at="2026-01-01T00:00:00+00:00",
            total_bindings=4,
            optimized_bindings=3,
            optimized_classes=2,
        )
        self.compiled: list[Path] = []

    def fingerprint(self) -> str | None:
        return self._fingerprint

    def compile(self, target_path: Path) -> None:
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_text(self.source)
        write_artifact_metadata(target_path, self.metadata)
        self.compiled.append(target_path)


class FingerprintlessCompiler:
    """Compiler that cannot report a fingerprint."""

    def __init__(self) -> None:
        self.compiled: list[Path] = []

    def compile(self, target_path: Path) -> None:
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_text(CONTAINER_SOURCE)
        self.compiled.append(target_path)


@pytest.fixture
def fake_compiler() -> Callable[..., FakeCompiler]:
    """Factory for FakeCompiler instances."""

    def _create(**kwargs: object) -> FakeCompiler:
        return FakeCompiler(**kwargs)  # type: ignore[arg-type]

    return _create


@pytest.fixture
def fingerprintless_compiler() -> FingerprintlessCompiler:
    """Compiler without the fingerprint capability."""
    return FingerprintlessCompiler()


@pytest.fixture
def write_container(paths: PathsConfig) -> Callable[[str], Path]:
    """Write artifact source to the container cache file."""

    def _write(source: str = CONTAINER_SOURCE) -> Path:
        target = paths.container_cache_file
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(source)
        return target

    return _write
