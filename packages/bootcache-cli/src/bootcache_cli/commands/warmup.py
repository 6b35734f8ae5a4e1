"""bootcache warmup command - Build and validate the compiled container.

Also registered as `cache-build-container`, the warm-state maintenance step
run by `bootcache benchmark --compare-cache`.
"""

from __future__ import annotations

import click

from bootcache_cli.errors import fail
from bootcache_cli.output import comment, info, success

CONFIG_OPTION_HELP = "Path to bootcache.yaml [default: <base path>/bootcache.yaml]"


@click.command("warmup")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help=CONFIG_OPTION_HELP,
)
def warmup(config_file: str | None) -> None:
    """Compile the container cache if stale, then validate and instrument it.

    The compiler is skipped when its fingerprint matches the one recorded for
    the existing artifact. Every run validates the artifact, refreshes the
    bytecode cache, rewrites the preload script and records metrics.

    Examples:

        bootcache warmup

        BOOTCACHE_COMPILER=myapp.container:build_compiler bootcache warmup
    """
    # Import here to keep --help fast
    from bootcache_core.config import BootcacheConfig
    from bootcache_core.errors import BootcacheError
    from bootcache_core.registry import build_registry, resolve_bytecode_cache, resolve_compiler
    from bootcache_core.warmup import ArtifactValidator, WarmupRunner, WarmupStatus

    try:
        config = BootcacheConfig.load(config_file)
        registry = build_registry(config)
        runner = WarmupRunner(
            resolve_compiler(registry),
            config.paths,
            validator=ArtifactValidator(entry_point=config.warmup.entry_point),
            bytecode_cache=resolve_bytecode_cache(registry),
        )
        outcome = runner.run()
    except BootcacheError as e:
        fail(e.user_message, prefix="Container warmup failed")
    except Exception as e:
        # The compiler is third-party code; anything it raises ends the warmup
        fail(str(e) or type(e).__name__, prefix="Container warmup failed")

    if outcome.status is WarmupStatus.UP_TO_DATE:
        info(f"Container cache already up to date at {outcome.cache_file}")
    else:
        success(f"Container cache warmed at {outcome.cache_file}")

    comment(
        f"Compile hit rate {outcome.compile_hit_rate:.2f}% "
        f"({outcome.optimized_bindings}/{outcome.total_bindings} bindings), "
        f"fallback rate {outcome.fallback_rate:.2f}%, "
        f"{outcome.warmup_duration_ms:.2f}ms"
    )


# Registered under its own name so help lists it; shares warmup's options and body
cache_build_container = click.Command(
    "cache-build-container",
    callback=warmup.callback,
    params=warmup.params,
    help="Alias of `warmup`: compile the container cache if stale, then validate it.",
)
