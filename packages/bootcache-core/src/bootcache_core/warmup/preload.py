"""Preload script generation.

The preload script sits in the cache directory. Executed at process boot, it
compiles every known cache file (config, routes, container) into the
bytecode cache so the first import does not pay for it.
"""

from __future__ import annotations

from pathlib import Path

from bootcache_core.config import PRELOAD_FILE_NAME
from bootcache_core.fileio import write_locked

PRELOAD_FILE_MODE = 0o644

PRELOAD_SCRIPT = '''\
"""Prime the bytecode cache for startup cache files. Generated by bootcache warmup."""

from __future__ import annotations

import py_compile
import sys
from pathlib import Path

CACHE_DIR = Path(__file__).resolve().parent
CACHE_FILES = (
    CACHE_DIR / "config.py",
    CACHE_DIR / "routes.py",
    CACHE_DIR / "container.py",
)


def preload() -> None:
    if sys.dont_write_bytecode:
        return
    for cache_file in CACHE_FILES:
        if cache_file.is_file():
            try:
                py_compile.compile(str(cache_file), doraise=True)
            except (OSError, py_compile.PyCompileError):
                continue


preload()
'''


def write_preload_script(cache_dir: Path) -> Path:
    """Rewrite the preload script in ``cache_dir``.

    Args:
        cache_dir: Cache directory holding the compiled artifacts.

    Returns:
        Path of the written script.
    """
    cache_dir.mkdir(parents=True, exist_ok=True)
    return write_locked(cache_dir / PRELOAD_FILE_NAME, PRELOAD_SCRIPT, mode=PRELOAD_FILE_MODE)
