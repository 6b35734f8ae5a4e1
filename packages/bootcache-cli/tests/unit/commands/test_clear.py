"""Tests for the cache-clear-container command."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from bootcache_cli.commands.clear import cache_clear_container
from bootcache_cli.commands.warmup import warmup

CACHE_DIR = Path("storage") / "cache"


def _flat(output: str) -> str:
    return " ".join(output.split())


def test_clear_removes_warmup_artifacts(
    cli_runner: CliRunner, app_dir: Path, app_compiler: str
) -> None:
    """Everything warmup produced is removed."""
    assert cli_runner.invoke(warmup, []).exit_code == 0

    result = cli_runner.invoke(cache_clear_container, [])

    assert result.exit_code == 0, result.output
    assert "Compiled container cache cleared" in _flat(result.output)
    cache_dir = app_dir / CACHE_DIR
    for name in ("container.py", "container.meta.json", "preload.py", "container-metrics.json"):
        assert not (cache_dir / name).exists()


def test_clear_when_nothing_cached(cli_runner: CliRunner, app_dir: Path) -> None:
    """Clearing an empty cache succeeds."""
    result = cli_runner.invoke(cache_clear_container, [])

    assert result.exit_code == 0, result.output
    assert "Container cache already clear" in _flat(result.output)


def test_clear_leaves_other_files(cli_runner: CliRunner, app_dir: Path) -> None:
    """Unrelated cache files survive."""
    cache_dir = app_dir / CACHE_DIR
    cache_dir.mkdir(parents=True)
    (cache_dir / "container.py").write_text("x = 1\n")
    (cache_dir / "routes.php").write_text("routes\n")

    result = cli_runner.invoke(cache_clear_container, [])

    assert result.exit_code == 0, result.output
    assert not (cache_dir / "container.py").exists()
    assert (cache_dir / "routes.php").exists()
