"""bootcache cache-clear-container command - Remove the compiled container cache."""

from __future__ import annotations

import click

from bootcache_cli.errors import fail
from bootcache_cli.output import comment, info, success


@click.command("cache-clear-container")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to bootcache.yaml [default: <base path>/bootcache.yaml]",
)
def cache_clear_container(config_file: str | None) -> None:
    """Remove the compiled container, its metadata, preload script and metrics.

    Succeeds when there is nothing to remove.
    """
    from bootcache_core.config import BootcacheConfig
    from bootcache_core.errors import BootcacheError
    from bootcache_core.registry import build_registry, resolve_bytecode_cache
    from bootcache_core.warmup import clear_container_cache

    try:
        config = BootcacheConfig.load(config_file)
        registry = build_registry(config)
        removed = clear_container_cache(config.paths, resolve_bytecode_cache(registry))
    except BootcacheError as e:
        fail(e.user_message, prefix="Container cache clear failed")
    except OSError as e:
        fail(f"{e.strerror or e}: {e.filename}", prefix="Container cache clear failed")

    if not removed:
        info("Container cache already clear")
        return

    for path in removed:
        comment(f"Removed {path}")
    success("Compiled container cache cleared")
