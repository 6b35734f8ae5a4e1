"""Benchmark command-line normalization.

Users may paste a full invocation (``python console.py --help``) or just its
arguments (``--help``). The interpreter and entry-script tokens are stripped
so the harness can prepend its own.
"""

from __future__ import annotations

import os
import re
import sys

from bootcache_core.errors import ConfigurationError

_INTERPRETER_PATTERN = re.compile(r"^python(\d+(\.\d+)?)?$")


def is_interpreter_token(token: str) -> bool:
    """Check whether ``token`` names a Python interpreter."""
    name = os.path.basename(token)
    return bool(_INTERPRETER_PATTERN.match(name)) or name == os.path.basename(sys.executable)


def normalize_target_command(raw: str, entry: str) -> list[str]:
    """Tokenize a benchmark target on whitespace.

    A leading interpreter token and then a leading entry-script token are
    dropped when present.

    Args:
        raw: Free-form command string.
        entry: Entry script path or name.

    Returns:
        Remaining argument tokens; empty if nothing is left.

    Example:
        >>> normalize_target_command("python3 console.py routes --json", "console.py")
        ['routes', '--json']
    """
    tokens = raw.split()
    if not tokens:
        return []

    if is_interpreter_token(tokens[0]):
        tokens = tokens[1:]

    entry_name = os.path.basename(entry.rstrip("/"))
    if tokens and entry_name and os.path.basename(tokens[0]) == entry_name:
        tokens = tokens[1:]

    return tokens


def parse_target_command(raw: str, entry: str) -> list[str]:
    """Normalize a benchmark target, rejecting one with nothing left to run.

    Raises:
        ConfigurationError: If normalization leaves no arguments.
    """
    tokens = normalize_target_command(raw, entry)
    if not tokens:
        raise ConfigurationError(
            "Target command is empty. Provide a valid command with --command.",
            field_path="command",
        )
    return tokens
