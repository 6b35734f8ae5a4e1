"""bootcache-cli: Command-line interface for bootcache.

Provides the `bootcache` command with warmup, benchmark, cache clearing and
optimize subcommands.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
