"""Custom exception hierarchy for bootcache-core.

This module defines the exception classes used throughout bootcache:
- BootcacheError: Base exception for all bootcache errors
- SpawnError: The OS refused to create a child process
- ProcessFailure: A child process exited non-zero
- ArtifactMissing / ArtifactInvalid: Compiled artifact validation failures
- ConfigurationError: Invalid options, thresholds or export targets
- EncodingFailure: Metrics or report serialization failed
- ThresholdExceeded: A benchmark gate was not met

User-facing messages are safe to display and are printed as a single line at
the CLI boundary. Technical details are logged internally via structlog.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from bootcache_core.process import ProcessResult

logger = structlog.get_logger(__name__)


class BootcacheError(Exception):
    """Base exception for bootcache.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but never part of the user message.

    Example:
        >>> raise BootcacheError(
        ...     "Container warmup failed",
        ...     internal_details="compile() raised KeyError('db')",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize BootcacheError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "bootcache_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class SpawnError(BootcacheError):
    """Raised when the operating system cannot create a child process.

    Fatal to whatever operation requested the process.

    Attributes:
        argv: The argument vector that could not be started.
    """

    def __init__(
        self,
        argv: list[str],
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize SpawnError.

        Args:
            argv: Argument vector that failed to start.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(
            "Unable to start benchmark process. Ensure process execution is permitted.",
            internal_details=internal_details,
        )
        self.argv = argv


class ProcessFailure(BootcacheError):
    """Raised when a child process exits with a non-zero status.

    Attributes:
        result: The captured result of the failed process, if available.
    """

    def __init__(
        self,
        user_message: str,
        *,
        result: ProcessResult | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ProcessFailure.

        Args:
            user_message: Message including the captured stderr/stdout.
            result: Captured process result.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message, internal_details=internal_details)
        self.result = result


class ProcessTimeout(ProcessFailure):
    """Raised when a child process exceeds its configured timeout.

    Attributes:
        timeout_seconds: The timeout that elapsed.
    """

    def __init__(self, argv: list[str], timeout_seconds: float) -> None:
        """Initialize ProcessTimeout.

        Args:
            argv: Argument vector of the killed process.
            timeout_seconds: Timeout that elapsed.
        """
        super().__init__(f"Process timed out after {timeout_seconds:g}s: {' '.join(argv)}")
        self.argv = argv
        self.timeout_seconds = timeout_seconds


class ArtifactMissing(BootcacheError):
    """Raised when the compiled artifact does not exist after a build."""

    def __init__(self, path: str) -> None:
        """Initialize ArtifactMissing.

        Args:
            path: Expected artifact location.
        """
        super().__init__(f"Compiled container file was not created: {path}")
        self.path = path


class ArtifactInvalid(BootcacheError):
    """Raised when the compiled artifact loads but has the wrong shape.

    Attributes:
        path: Artifact location.
        entry_point: Name of the expected compiled class.
    """

    def __init__(
        self,
        path: str,
        entry_point: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ArtifactInvalid.

        Args:
            path: Artifact location.
            entry_point: Name of the expected compiled class.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(
            f"Compiled container class [{entry_point}] is missing or invalid in {path}",
            internal_details=internal_details,
        )
        self.path = path
        self.entry_point = entry_point


class ConfigurationError(BootcacheError):
    """Raised when options, thresholds or export targets are invalid.

    Surfaced before any process is spawned wherever possible.

    Attributes:
        field_path: Dot-separated path to the offending option (if known).

    Example:
        >>> raise ConfigurationError(
        ...     "Benchmark threshold options must be numeric.",
        ...     field_path="benchmark.max_p95_ms",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            user_message: Safe message to display to the user.
            field_path: Dot-separated path to the option (optional).
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message, internal_details=internal_details)
        self.field_path = field_path


class CompilerUnavailable(ConfigurationError):
    """Raised when no compiler provider is registered or it cannot be loaded."""

    pass


class EncodingFailure(BootcacheError):
    """Raised when a payload cannot be serialized.

    Non-fatal for warmup metrics, fatal for benchmark export.
    """

    pass


class ThresholdExceeded(BootcacheError):
    """Raised when a benchmark result violates an operator-supplied limit."""

    pass
