"""Shared test fixtures for bootcache-cli tests.

Provides CliRunner fixtures, an application directory with a console entry
script, and an importable compiler provider.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

BASE_PATH_ENV_VAR = "BOOTCACHE_BASE_PATH"
COMPILER_ENV_VAR = "BOOTCACHE_COMPILER"
FAIL_ENV_VAR = "BOOTCACHE_TEST_FAIL"
COMPILER_MODULE = "bootcache_test_app_compiler"

# Entry script of the application under benchmark. Cache maintenance steps
# are appended to steps.log; the command named by BOOTCACHE_TEST_FAIL fails.
CONSOLE_SCRIPT = '''\
import os
import sys
from pathlib import Path

command = sys.argv[1] if len(sys.argv) > 1 else ""
if command == os.environ.get("BOOTCACHE_TEST_FAIL"):
    print(f"{command} exploded", file=sys.stderr)
    sys.exit(1)
if command.startswith("cache-"):
    with Path(__file__).with_name("steps.log").open("a") as log:
        log.write(command + "\\n")
print("usage: console.py [command]")
'''

COMPILER_SOURCE = '''\
import os

from bootcache_core.warmup.metadata import write_artifact_metadata
from bootcache_core.warmup.models import ArtifactMetadata

CONTAINER = """\\
from bootcache_core.warmup.contracts import ContainerContract


class CompiledContainer(ContainerContract):
    def has(self, key):
        return key == "db"

    def get(self, key):
        return "sqlite"
"""


class AppCompiler:
    def fingerprint(self):
        return os.environ.get("BOOTCACHE_TEST_FINGERPRINT", "fp-1")

    def compile(self, target_path):
        error = os.environ.get("BOOTCACHE_TEST_COMPILE_ERROR")
        if error:
            raise RuntimeError(error)
        target_path.write_text(CONTAINER)
        write_artifact_metadata(
            target_path,
            ArtifactMetadata(
                fingerprint=self.fingerprint(),
                total_bindings=10,
                optimized_bindings=8,
                optimized_classes=3,
            ),
        )


def build_compiler():
    return AppCompiler()
'''


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Keep structlog output out of command output."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def app_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Application base path with a console entry script.

    Returns:
        The base path, also exported as BOOTCACHE_BASE_PATH.
    """
    (tmp_path / "console.py").write_text(CONSOLE_SCRIPT)
    monkeypatch.setenv(BASE_PATH_ENV_VAR, str(tmp_path))
    monkeypatch.delenv(COMPILER_ENV_VAR, raising=False)
    monkeypatch.delenv(FAIL_ENV_VAR, raising=False)
    monkeypatch.delenv("BOOTCACHE_TEST_FINGERPRINT", raising=False)
    monkeypatch.delenv("BOOTCACHE_TEST_COMPILE_ERROR", raising=False)
    return tmp_path


@pytest.fixture
def app_compiler(app_dir: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Install an importable compiler provider and point BOOTCACHE_COMPILER at it.

    Returns:
        The provider import path.
    """
    (app_dir / f"{COMPILER_MODULE}.py").write_text(COMPILER_SOURCE)
    monkeypatch.syspath_prepend(str(app_dir))
    monkeypatch.delitem(sys.modules, COMPILER_MODULE, raising=False)
    provider = f"{COMPILER_MODULE}:build_compiler"
    monkeypatch.setenv(COMPILER_ENV_VAR, provider)
    return provider


@pytest.fixture
def steps_log(app_dir: Path) -> Path:
    """File the entry script appends maintenance steps to."""
    return app_dir / "steps.log"
