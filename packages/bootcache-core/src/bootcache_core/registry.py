"""Capability registry built once at startup.

Commands receive their collaborators through constructor injection. The
registry maps a capability name to a provider factory; it is populated from
configuration when the CLI starts and never inspects types at resolution
time.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from bootcache_core.errors import CompilerUnavailable, ConfigurationError
from bootcache_core.warmup.bytecode import create_bytecode_cache

if TYPE_CHECKING:
    from bootcache_core.config import BootcacheConfig
    from bootcache_core.warmup.bytecode import BytecodeCache
    from bootcache_core.warmup.contracts import Compiler

COMPILER = "compiler"
BYTECODE_CACHE = "bytecode_cache"

Provider = Callable[[], Any]


class ProviderRegistry:
    """Maps capabilities to provider factories.

    Providers are called at most once; the result is memoized.

    Example:
        >>> registry = ProviderRegistry()
        >>> registry.register("compiler", MyCompiler)
        >>> compiler = registry.resolve("compiler")
    """

    def __init__(self) -> None:
        self._providers: dict[str, Provider] = {}
        self._instances: dict[str, Any] = {}

    def register(self, capability: str, provider: Provider) -> None:
        """Register (or replace) the provider for a capability."""
        self._providers[capability] = provider
        self._instances.pop(capability, None)

    def has(self, capability: str) -> bool:
        """Check whether a capability has a provider."""
        return capability in self._providers

    def resolve(self, capability: str) -> Any:
        """Return the instance for a capability.

        Raises:
            ConfigurationError: If no provider is registered.
        """
        if capability not in self._instances:
            if capability not in self._providers:
                raise ConfigurationError(f"No provider registered for '{capability}'")
            self._instances[capability] = self._providers[capability]()
        return self._instances[capability]


def load_provider(import_path: str) -> Provider:
    """Import a provider from a ``module:attribute`` path.

    Args:
        import_path: e.g. "myapp.container:build_compiler".

    Returns:
        The imported callable.

    Raises:
        CompilerUnavailable: If the path is malformed or cannot be imported.
    """
    module_name, sep, attr_name = import_path.partition(":")
    if not sep or not module_name or not attr_name:
        raise CompilerUnavailable(
            f"Invalid compiler provider '{import_path}'. Expected 'module:attribute'.",
            field_path="warmup.compiler",
        )

    try:
        module = importlib.import_module(module_name)
        provider = getattr(module, attr_name)
    except (ImportError, AttributeError) as e:
        raise CompilerUnavailable(
            f"Unable to load compiler provider '{import_path}'",
            field_path="warmup.compiler",
            internal_details=f"{type(e).__name__}: {e}",
        ) from None

    if not callable(provider):
        raise CompilerUnavailable(
            f"Compiler provider '{import_path}' is not callable",
            field_path="warmup.compiler",
        )
    return provider  # type: ignore[no-any-return]


def build_registry(config: BootcacheConfig) -> ProviderRegistry:
    """Build the registry for a configuration.

    Args:
        config: Loaded configuration.

    Returns:
        Registry with the bytecode cache and, if configured, the compiler.
    """
    registry = ProviderRegistry()
    mode = config.warmup.bytecode_cache
    registry.register(BYTECODE_CACHE, lambda: create_bytecode_cache(mode))
    if config.warmup.compiler:
        registry.register(COMPILER, load_provider(config.warmup.compiler))
    return registry


def resolve_compiler(registry: ProviderRegistry) -> Compiler:
    """Resolve the compiler capability.

    Raises:
        CompilerUnavailable: If no compiler is registered or the provider
            returned an object without ``compile``.
    """
    if not registry.has(COMPILER):
        raise CompilerUnavailable(
            "Current container implementation does not support compilation. "
            "Set BOOTCACHE_COMPILER or warmup.compiler.",
            field_path="warmup.compiler",
        )
    compiler = registry.resolve(COMPILER)
    if not callable(getattr(compiler, "compile", None)):
        raise CompilerUnavailable(
            "Current container implementation does not support compilation.",
            field_path="warmup.compiler",
        )
    return compiler  # type: ignore[no-any-return]


def resolve_bytecode_cache(registry: ProviderRegistry) -> BytecodeCache:
    """Resolve the bytecode cache capability."""
    return registry.resolve(BYTECODE_CACHE)  # type: ignore[no-any-return]
