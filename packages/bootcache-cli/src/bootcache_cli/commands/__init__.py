"""CLI command modules.

Each module defines one or more click commands, loaded lazily by
bootcache_cli.main.LazyGroup.
"""

from __future__ import annotations

__all__: list[str] = []
