"""Tests for the warmup command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from bootcache_cli.commands.warmup import warmup

CACHE_DIR = Path("storage") / "cache"


def _flat(output: str) -> str:
    return " ".join(output.split())


@pytest.mark.requirement("warmup-cli")
def test_warmup_without_compiler_fails(cli_runner: CliRunner, app_dir: Path) -> None:
    """Without a compiler provider the warmup fails with one line."""
    result = cli_runner.invoke(warmup, [])

    assert result.exit_code == 1
    output = _flat(result.output)
    assert "Container warmup failed" in output
    assert "does not support compilation" in output
    assert not (app_dir / CACHE_DIR / "container.py").exists()


@pytest.mark.requirement("warmup-cli")
def test_warmup_compiles_and_records_metrics(
    cli_runner: CliRunner, app_dir: Path, app_compiler: str
) -> None:
    """A first warmup compiles, validates and writes metrics."""
    result = cli_runner.invoke(warmup, [])

    assert result.exit_code == 0, result.output
    output = _flat(result.output)
    assert "Container cache warmed" in output
    assert "Compile hit rate 80.00% (8/10 bindings)" in output
    assert "fallback rate 20.00%" in output

    cache_dir = app_dir / CACHE_DIR
    assert (cache_dir / "container.py").is_file()
    assert (cache_dir / "preload.py").is_file()

    metrics = json.loads((cache_dir / "container-metrics.json").read_text())
    assert metrics["status"] == "compiled"
    assert metrics["total_bindings"] == 10
    assert metrics["optimized_bindings"] == 8
    assert metrics["fallback_bindings"] == 2
    assert metrics["fingerprint"] == "fp-1"


def test_second_warmup_is_up_to_date(
    cli_runner: CliRunner, app_dir: Path, app_compiler: str
) -> None:
    """An unchanged fingerprint skips compilation."""
    assert cli_runner.invoke(warmup, []).exit_code == 0

    result = cli_runner.invoke(warmup, [])

    assert result.exit_code == 0, result.output
    assert "Container cache already up to date" in _flat(result.output)
    metrics = json.loads((app_dir / CACHE_DIR / "container-metrics.json").read_text())
    assert metrics["status"] == "up_to_date"


def test_changed_fingerprint_recompiles(
    cli_runner: CliRunner,
    app_dir: Path,
    app_compiler: str,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A new fingerprint forces a rebuild."""
    assert cli_runner.invoke(warmup, []).exit_code == 0
    monkeypatch.setenv("BOOTCACHE_TEST_FINGERPRINT", "fp-2")

    result = cli_runner.invoke(warmup, [])

    assert result.exit_code == 0, result.output
    assert "Container cache warmed" in _flat(result.output)
    metrics = json.loads((app_dir / CACHE_DIR / "container-metrics.json").read_text())
    assert metrics["fingerprint"] == "fp-2"


def test_compiler_error_is_reported(
    cli_runner: CliRunner,
    app_dir: Path,
    app_compiler: str,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Exceptions raised by the compiler end the warmup with exit 1."""
    monkeypatch.setenv("BOOTCACHE_TEST_COMPILE_ERROR", "graph has a cycle")

    result = cli_runner.invoke(warmup, [])

    assert result.exit_code == 1
    assert "Container warmup failed: graph has a cycle" in _flat(result.output)


def test_unknown_provider_fails(
    cli_runner: CliRunner, app_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A provider path that cannot be imported is a warmup failure."""
    monkeypatch.setenv("BOOTCACHE_COMPILER", "no_such_module_here:build")

    result = cli_runner.invoke(warmup, [])

    assert result.exit_code == 1
    assert "Unable to load compiler provider" in _flat(result.output)


def test_warmup_reads_config_file(
    cli_runner: CliRunner, app_dir: Path, app_compiler: str
) -> None:
    """The cache directory can be moved in bootcache.yaml."""
    (app_dir / "bootcache.yaml").write_text("paths:\n  cache_dir: var/cache\n")

    result = cli_runner.invoke(warmup, [])

    assert result.exit_code == 0, result.output
    assert (app_dir / "var" / "cache" / "container.py").is_file()


def test_invalid_config_file(cli_runner: CliRunner, app_dir: Path) -> None:
    """Unknown configuration keys are rejected."""
    (app_dir / "bootcache.yaml").write_text("warmup:\n  compilr: x:y\n")

    result = cli_runner.invoke(warmup, [])

    assert result.exit_code == 1
    assert "Invalid configuration" in _flat(result.output)
