"""Child process execution with full output capture.

ProcessRunner spawns one process at a time, closes its stdin immediately,
captures stdout and stderr separately and measures spawn-to-exit wall clock
with a monotonic high-resolution clock. Runs are strictly sequential; the
caller blocks until the child exits.
"""

from __future__ import annotations

import subprocess
import time
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field

from bootcache_core.errors import ProcessTimeout, SpawnError

logger = structlog.get_logger(__name__)


class ProcessResult(BaseModel):
    """Outcome of a single child process invocation.

    Attributes:
        argv: Argument vector that was executed
        exit_code: Process exit status
        stdout: Captured standard output
        stderr: Captured standard error
        duration_ms: Wall clock from spawn to exit in milliseconds

    Example:
        >>> result = ProcessResult(argv=["true"], exit_code=0, duration_ms=3.2)
        >>> result.succeeded
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    argv: list[str] = Field(default_factory=list, description="Executed argument vector")
    exit_code: int = Field(..., description="Process exit status")
    stdout: str = Field(default="", description="Captured stdout")
    stderr: str = Field(default="", description="Captured stderr")
    duration_ms: float = Field(default=0.0, ge=0.0, description="Duration in milliseconds")

    @property
    def succeeded(self) -> bool:
        """Check if the process exited with status 0."""
        return self.exit_code == 0

    def failure_output(self) -> str:
        """Return trimmed stderr, falling back to stdout when stderr is empty."""
        stderr = self.stderr.strip()
        return stderr if stderr else self.stdout.strip()


class ProcessRunner:
    """Runs argument vectors synchronously and captures their output.

    Attributes:
        timeout_seconds: Optional bound on each child's lifetime. None waits
            forever.

    Example:
        >>> runner = ProcessRunner()
        >>> result = runner.run(["python", "-c", "print('hi')"], cwd=Path("."))
        >>> result.stdout
        'hi\\n'
    """

    def __init__(self, timeout_seconds: float | None = None) -> None:
        """Initialize the runner.

        Args:
            timeout_seconds: Kill the child and raise ProcessTimeout after
                this many seconds. None disables the timeout.
        """
        self.timeout_seconds = timeout_seconds
        self._log = logger.bind(component="process_runner")

    def run(self, argv: list[str], cwd: Path | str | None = None) -> ProcessResult:
        """Execute ``argv`` in ``cwd`` and wait for it to exit.

        The measured duration is never adjusted; callers discard warmup
        measurements themselves.

        Args:
            argv: Argument vector, program first.
            cwd: Working directory for the child.

        Returns:
            ProcessResult with exit code, captured output and duration.

        Raises:
            SpawnError: If the OS cannot create the process.
            ProcessTimeout: If a timeout is configured and elapses.
        """
        argv = [str(arg) for arg in argv]
        self._log.debug("process_starting", argv=argv, cwd=str(cwd) if cwd else None)

        start = time.perf_counter()
        try:
            completed = subprocess.run(
                argv,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired:
            self._log.error("process_timeout", argv=argv, timeout_seconds=self.timeout_seconds)
            raise ProcessTimeout(argv, self.timeout_seconds or 0.0) from None
        except OSError as e:
            raise SpawnError(argv, internal_details=f"{type(e).__name__}: {e}") from e
        duration_ms = (time.perf_counter() - start) * 1000

        self._log.debug(
            "process_completed",
            exit_code=completed.returncode,
            duration_ms=round(duration_ms, 3),
        )

        return ProcessResult(
            argv=argv,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            duration_ms=duration_ms,
        )
