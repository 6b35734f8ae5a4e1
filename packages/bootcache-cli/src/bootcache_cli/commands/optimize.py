"""bootcache optimize / optimize-clear commands.

Run the cache maintenance subcommands of the console entry script in
sequence: the build steps for `optimize`, the clear steps in reverse order
for `optimize-clear`. The first failing step aborts the rest.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

import click
import structlog

from bootcache_cli.errors import fail
from bootcache_cli.output import comment, success

logger = structlog.get_logger(__name__)

_entry_option = click.option(
    "--entry",
    type=str,
    default=None,
    help="Console entry script, relative to the base path [default: console.py]",
)
_config_option = click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to bootcache.yaml [default: <base path>/bootcache.yaml]",
)


def run_steps(entry: str | None, config_file: str | None, reverse_clear: bool) -> list[str]:
    """Run the build steps, or the clear steps in reverse.

    Args:
        entry: Entry script override.
        config_file: Optional bootcache.yaml.
        reverse_clear: Run clear steps (reversed) instead of build steps.

    Returns:
        The steps that ran.

    Raises:
        CLIError: On the first failing step or invalid configuration.
    """
    from bootcache_core.config import BootcacheConfig
    from bootcache_core.errors import BootcacheError, ProcessFailure
    from bootcache_core.process import ProcessRunner

    try:
        config = BootcacheConfig.load(config_file)
    except BootcacheError as e:
        fail(e.user_message)

    bench = config.benchmark
    steps: Sequence[str] = (
        tuple(reversed(bench.clear_steps)) if reverse_clear else bench.build_steps
    )
    entry_script = config.paths.resolve(entry or bench.entry)
    runner = ProcessRunner(timeout_seconds=bench.timeout_seconds)
    interpreter = sys.executable or "python"

    for step in steps:
        logger.info("optimize_step", step=step)
        try:
            result = runner.run(
                [interpreter, str(entry_script), step],
                cwd=config.paths.base_path,
            )
            if not result.succeeded:
                raise ProcessFailure(result.failure_output(), result=result)
        except BootcacheError as e:
            fail(e.user_message, prefix=f'Optimize failed at step "{step}"')
        comment(f"{step} done")

    return list(steps)


@click.command("optimize")
@_entry_option
@_config_option
def optimize(entry: str | None, config_file: str | None) -> None:
    """Build the config, routes and container caches."""
    run_steps(entry, config_file, reverse_clear=False)
    success("Application caches optimized")


@click.command("optimize-clear")
@_entry_option
@_config_option
def optimize_clear(entry: str | None, config_file: str | None) -> None:
    """Clear the container, routes and config caches."""
    run_steps(entry, config_file, reverse_clear=True)
    success("Application caches cleared")
