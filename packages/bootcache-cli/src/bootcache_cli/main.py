"""CLI entry point for bootcache.

Defines the main CLI group using a LazyGroup so `bootcache --help` never
imports the warmup or benchmark engines.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from bootcache_cli import __version__
from bootcache_cli.errors import CLIError
from bootcache_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LazyGroup(rclick.RichGroup):
    """Click group that imports commands only when they are invoked.

    Attributes:
        lazy_subcommands: Mapping of command names to "module.attribute" paths.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize LazyGroup.

        Args:
            *args: Positional arguments for parent class.
            lazy_subcommands: Mapping of command name to module path.
                Format: {"warmup": "bootcache_cli.commands.warmup.warmup"}
            **kwargs: Keyword arguments for parent class.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return the sorted names of registered and lazy commands."""
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, importing it on first use.

        Args:
            ctx: Click context.
            cmd_name: Name of the command to get.

        Returns:
            Click Command instance, or None if not found.
        """
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_name, attr_name = self.lazy_subcommands[cmd_name].rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]

    def invoke(self, ctx: click.Context) -> Any:
        """Invoke the group, reporting CLIError as one rich error line.

        rich-click renders ClickExceptions that reach main() as a boxed panel,
        so CLIError is shown here and converted to a plain exit.
        """
        try:
            return super().invoke(ctx)
        except CLIError as e:
            e.show()
            ctx.exit(e.exit_code)


LAZY_COMMANDS = {
    "warmup": "bootcache_cli.commands.warmup.warmup",
    "cache-build-container": "bootcache_cli.commands.warmup.cache_build_container",
    "cache-clear-container": "bootcache_cli.commands.clear.cache_clear_container",
    "benchmark": "bootcache_cli.commands.benchmark.benchmark",
    "optimize": "bootcache_cli.commands.optimize.optimize",
    "optimize-clear": "bootcache_cli.commands.optimize.optimize_clear",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="bootcache")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Minimum level of diagnostic log lines (written to stderr).",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Emit diagnostic log lines as JSON.",
)
def cli(log_level: str, log_json: bool) -> None:
    """Bootcache - startup cache warmup and benchmarking.

    Build and validate the compiled container, then prove the cache pays off
    by measuring real process startup latency.

    **Getting Started:**

    - `bootcache warmup` - Compile (if stale) and validate the container cache
    - `bootcache benchmark --compare-cache` - Compare cold and warm startup
    - `bootcache cache-clear-container` - Remove the compiled container cache

    **Environment:**

    - `BOOTCACHE_BASE_PATH` - Application base path (default: current directory)
    - `BOOTCACHE_COMPILER` - Compiler provider as `module:factory`
    """
    from bootcache_core.observability import configure_logging

    configure_logging(log_level=log_level, json_format=log_json)


if __name__ == "__main__":
    cli()
