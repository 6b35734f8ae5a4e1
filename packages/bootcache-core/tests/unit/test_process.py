"""Unit tests for the process runner."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from bootcache_core.errors import ProcessTimeout, SpawnError
from bootcache_core.process import ProcessResult, ProcessRunner


class TestProcessResult:
    """Tests for ProcessResult."""

    def test_succeeded(self) -> None:
        """Exit 0 is success."""
        assert ProcessResult(exit_code=0).succeeded
        assert not ProcessResult(exit_code=1).succeeded

    def test_failure_output_prefers_stderr(self) -> None:
        """stderr is reported when present."""
        result = ProcessResult(exit_code=1, stdout="out", stderr="  err\n")
        assert result.failure_output() == "err"

    def test_failure_output_falls_back_to_stdout(self) -> None:
        """Whitespace-only stderr falls back to stdout."""
        result = ProcessResult(exit_code=1, stdout="out\n", stderr=" \n")
        assert result.failure_output() == "out"


class TestProcessRunner:
    """Tests for ProcessRunner.run against real children."""

    def test_captures_output(self, tmp_path: Path) -> None:
        """stdout, stderr and the exit code are captured separately."""
        code = "import sys; print('hi'); print('warn', file=sys.stderr); sys.exit(3)"

        result = ProcessRunner().run([sys.executable, "-c", code], cwd=tmp_path)

        assert result.exit_code == 3
        assert result.stdout == "hi\n"
        assert result.stderr == "warn\n"
        assert result.duration_ms > 0.0
        assert result.argv[0] == sys.executable

    def test_working_directory(self, tmp_path: Path) -> None:
        """The child runs in the requested directory."""
        code = "import os; print(os.getcwd())"

        result = ProcessRunner().run([sys.executable, "-c", code], cwd=tmp_path)

        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    def test_stdin_is_closed(self, tmp_path: Path) -> None:
        """Reading stdin sees end of file immediately."""
        code = "import sys; print(repr(sys.stdin.read()))"

        result = ProcessRunner().run([sys.executable, "-c", code], cwd=tmp_path)

        assert result.stdout.strip() == "''"

    def test_spawn_error(self, tmp_path: Path) -> None:
        """A missing executable raises SpawnError."""
        with pytest.raises(SpawnError):
            ProcessRunner().run([str(tmp_path / "does-not-exist")], cwd=tmp_path)

    def test_timeout(self, tmp_path: Path) -> None:
        """An optional timeout kills a hung child."""
        code = "import time; time.sleep(30)"

        with pytest.raises(ProcessTimeout) as exc_info:
            ProcessRunner(timeout_seconds=0.5).run([sys.executable, "-c", code], cwd=tmp_path)

        assert exc_info.value.timeout_seconds == 0.5
