"""Unit tests for the bootcache-core exception hierarchy."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from bootcache_core.errors import (
    ArtifactInvalid,
    ArtifactMissing,
    BootcacheError,
    CompilerUnavailable,
    ConfigurationError,
    EncodingFailure,
    ProcessFailure,
    ProcessTimeout,
    SpawnError,
    ThresholdExceeded,
)


class TestBootcacheError:
    """Tests for the base BootcacheError."""

    def test_stores_user_message(self) -> None:
        """user_message is exposed and is the str() of the error."""
        error = BootcacheError("Something went wrong")
        assert error.user_message == "Something went wrong"
        assert str(error) == "Something went wrong"

    def test_logs_internal_details(self) -> None:
        """internal_details are logged, never part of the message."""
        with capture_logs() as logs:
            error = BootcacheError("User sees this", internal_details="trace: compile.py:42")

        assert "trace" not in error.user_message
        assert logs == [
            {
                "event": "bootcache_error",
                "log_level": "error",
                "error_type": "BootcacheError",
                "user_message": "User sees this",
                "internal_details": "trace: compile.py:42",
            }
        ]

    def test_no_log_without_internal_details(self) -> None:
        """Nothing is logged without internal details."""
        with capture_logs() as logs:
            BootcacheError("Just a user message")
        assert logs == []


@pytest.mark.parametrize(
    "error_class",
    [
        SpawnError,
        ProcessFailure,
        ProcessTimeout,
        ArtifactMissing,
        ArtifactInvalid,
        ConfigurationError,
        CompilerUnavailable,
        EncodingFailure,
        ThresholdExceeded,
    ],
)
def test_hierarchy(error_class: type[Exception]) -> None:
    """Every error is a BootcacheError."""
    assert issubclass(error_class, BootcacheError)


def test_spawn_error_message() -> None:
    """SpawnError has a fixed, actionable message."""
    error = SpawnError(["python", "console.py"])
    assert error.user_message == (
        "Unable to start benchmark process. Ensure process execution is permitted."
    )
    assert error.argv == ["python", "console.py"]


def test_artifact_messages() -> None:
    """Artifact errors name the path and entry point."""
    assert ArtifactMissing("/c/container.py").user_message == (
        "Compiled container file was not created: /c/container.py"
    )
    assert ArtifactInvalid("/c/container.py", "CompiledContainer").user_message == (
        "Compiled container class [CompiledContainer] is missing or invalid in /c/container.py"
    )


def test_process_timeout() -> None:
    """ProcessTimeout is a ProcessFailure naming the timeout."""
    error = ProcessTimeout(["python", "console.py"], 2.5)
    assert isinstance(error, ProcessFailure)
    assert error.user_message == "Process timed out after 2.5s: python console.py"


def test_configuration_error_field_path() -> None:
    """ConfigurationError records the offending option."""
    error = CompilerUnavailable("missing", field_path="warmup.compiler")
    assert isinstance(error, ConfigurationError)
    assert error.field_path == "warmup.compiler"
