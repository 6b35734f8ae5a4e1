"""Rich console output utilities for bootcache-cli.

Formatted console output with Rich: colored success and error lines,
plain info lines and dimmed comments. Respects the NO_COLOR environment
variable and the --no-color flag.
"""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console

# Rich respects NO_COLOR itself; --no-color is applied through set_no_color()
_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Rich Console instance with appropriate color settings.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.

    Returns:
        Configured Console instance.
    """
    force_terminal = None
    if no_color or _force_no_color:
        force_terminal = False
    return Console(force_terminal=force_terminal, no_color=no_color or _force_no_color)


console = create_console()


def get_console() -> Console:
    """Return the current module-level console (honors set_no_color)."""
    return console


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark.

    Example:
        >>> success("Container cache warmed at storage/cache/container.py")
        ✓ Container cache warmed at storage/cache/container.py
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with red X.

    Example:
        >>> error("Target command is empty. Provide a valid command with --command.")
        ✗ Target command is empty. Provide a valid command with --command.
    """
    console.print(f"[red]✗[/red] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print an informational message."""
    console.print(message, **kwargs)


def comment(message: str, **kwargs: Any) -> None:
    """Print a secondary, dimmed message (progress notes, details)."""
    console.print(f"[dim]{message}[/dim]", **kwargs)


def set_no_color(no_color: bool) -> None:
    """Update the global console to enable/disable colors.

    Args:
        no_color: If True, disable colored output.
    """
    global console
    console = create_console(no_color=no_color)
