"""Bytecode cache capability.

Warmup primes the interpreter's bytecode cache for the compiled artifact and
its preload script. This is advisory: failures are logged and swallowed, and
when the interpreter does not write bytecode a no-op implementation is used.
The implementation is chosen once, at composition time.
"""

from __future__ import annotations

import importlib
import importlib.util
import py_compile
import sys
from pathlib import Path
from typing import Protocol

import structlog

from bootcache_core.config import BytecodeCacheMode

logger = structlog.get_logger(__name__)


class BytecodeCache(Protocol):
    """Invalidate and recompile cached bytecode for a source file."""

    def invalidate(self, path: Path) -> None:
        """Drop any cached bytecode for ``path``."""
        ...

    def compile(self, path: Path) -> None:
        """Compile ``path`` into the bytecode cache."""
        ...


class NullBytecodeCache:
    """Bytecode cache for interpreters that do not write bytecode."""

    def invalidate(self, path: Path) -> None:
        """Do nothing."""

    def compile(self, path: Path) -> None:
        """Do nothing."""


class PycBytecodeCache:
    """Maintains ``__pycache__`` entries with py_compile."""

    def __init__(self) -> None:
        self._log = logger.bind(component="bytecode_cache")

    def invalidate(self, path: Path) -> None:
        """Remove the cached .pyc for ``path`` and reset import finders."""
        try:
            Path(importlib.util.cache_from_source(str(path))).unlink(missing_ok=True)
        except (OSError, NotImplementedError, ValueError) as e:
            self._log.warning("bytecode_invalidate_failed", path=str(path), error=str(e))
        importlib.invalidate_caches()

    def compile(self, path: Path) -> None:
        """Write a fresh .pyc for ``path``."""
        try:
            py_compile.compile(
                str(path),
                doraise=True,
                invalidation_mode=py_compile.PycInvalidationMode.CHECKED_HASH,
            )
        except (OSError, py_compile.PyCompileError) as e:
            self._log.warning("bytecode_compile_failed", path=str(path), error=str(e))


def create_bytecode_cache(mode: BytecodeCacheMode = BytecodeCacheMode.AUTO) -> BytecodeCache:
    """Select the bytecode cache implementation.

    Args:
        mode: auto picks pyc unless the interpreter runs with
            dont_write_bytecode.

    Returns:
        BytecodeCache implementation.
    """
    if mode is BytecodeCacheMode.NONE:
        return NullBytecodeCache()
    if mode is BytecodeCacheMode.AUTO and sys.dont_write_bytecode:
        return NullBytecodeCache()
    return PycBytecodeCache()


def refresh(cache: BytecodeCache, path: Path) -> None:
    """Invalidate then recompile ``path``, never raising."""
    try:
        cache.invalidate(path)
        cache.compile(path)
    except Exception as e:  # noqa: BLE001
        logger.warning("bytecode_refresh_failed", path=str(path), error=str(e))
