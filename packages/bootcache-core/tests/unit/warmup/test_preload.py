"""Unit tests for preload script generation."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from bootcache_core.warmup.preload import write_preload_script


def test_writes_script(tmp_path: Path) -> None:
    """The script is written with conservative permissions."""
    script = write_preload_script(tmp_path / "cache")

    assert script.name == "preload.py"
    assert script.stat().st_mode & 0o777 == 0o644
    content = script.read_text()
    for name in ("config.py", "routes.py", "container.py"):
        assert name in content


def test_script_runs(tmp_path: Path) -> None:
    """The script executes cleanly with or without cache files present."""
    cache_dir = tmp_path / "cache"
    script = write_preload_script(cache_dir)
    (cache_dir / "container.py").write_text("VALUE = 1\n")

    completed = subprocess.run(
        [sys.executable, str(script)], capture_output=True, text=True, check=False
    )

    assert completed.returncode == 0, completed.stderr


def test_rewritten_each_time(tmp_path: Path) -> None:
    """A tampered script is replaced."""
    script = write_preload_script(tmp_path)
    script.write_text("raise SystemExit(1)\n")

    write_preload_script(tmp_path)

    assert "raise SystemExit(1)" not in script.read_text()
