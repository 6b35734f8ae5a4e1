"""CLI error handling for bootcache-cli.

Wraps bootcache-core exceptions into one-line, user-friendly messages with
the appropriate exit code.
"""

from __future__ import annotations

from typing import NoReturn

import click

from bootcache_cli.output import error

# Exit codes following sysexits.h convention
EXIT_USER_ERROR = 1  # Validation, process or threshold failure


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        """Initialize CLIError.

        Args:
            message: User-facing error message.
            exit_code: Exit code for the CLI.
        """
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        error(self.format_message())


def single_line(message: str) -> str:
    """Collapse a possibly multi-line message to one line.

    Captured process output often spans several lines; the CLI reports every
    failure as exactly one line.

    Example:
        >>> single_line("Run 2 failed for scenario \\"cached\\": boom\\n  at line 3")
        'Run 2 failed for scenario "cached": boom at line 3'
    """
    return " ".join(part.strip() for part in message.splitlines() if part.strip())


def fail(message: str, prefix: str | None = None) -> NoReturn:
    """Abort the current command with a one-line error.

    Args:
        message: Error description.
        prefix: Optional operation prefix ("Container warmup failed").

    Raises:
        CLIError: Always, with EXIT_USER_ERROR.
    """
    text = single_line(message) or "Unknown error"
    if prefix:
        text = f"{prefix}: {text}"
    raise CLIError(text, exit_code=EXIT_USER_ERROR)
