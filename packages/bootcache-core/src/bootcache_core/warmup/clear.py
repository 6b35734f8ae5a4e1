"""Container cache clearing."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from bootcache_core.warmup.bytecode import NullBytecodeCache

if TYPE_CHECKING:
    from bootcache_core.config import PathsConfig
    from bootcache_core.warmup.bytecode import BytecodeCache

logger = structlog.get_logger(__name__)


def clear_container_cache(
    paths: PathsConfig,
    bytecode_cache: BytecodeCache | None = None,
) -> list[Path]:
    """Remove the compiled container and everything warmup derived from it.

    Missing files are ignored.

    Args:
        paths: Cache layout.
        bytecode_cache: Bytecode cache to invalidate for removed files.

    Returns:
        Files that were removed.
    """
    cache = bytecode_cache or NullBytecodeCache()
    removed: list[Path] = []

    for path in (
        paths.container_cache_file,
        paths.metadata_file,
        paths.preload_file,
        paths.metrics_file,
    ):
        if not path.is_file():
            continue
        if path.suffix == ".py":
            try:
                cache.invalidate(path)
            except Exception as e:  # noqa: BLE001
                logger.warning("bytecode_invalidate_failed", path=str(path), error=str(e))
        path.unlink(missing_ok=True)
        removed.append(path)

    logger.info("container_cache_cleared", removed=[str(p) for p in removed])
    return removed
