"""Unit tests for the capability registry."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from bootcache_core.config import BootcacheConfig, BytecodeCacheMode, PathsConfig, WarmupConfig
from bootcache_core.errors import CompilerUnavailable, ConfigurationError
from bootcache_core.registry import (
    COMPILER,
    ProviderRegistry,
    build_registry,
    load_provider,
    resolve_bytecode_cache,
    resolve_compiler,
)
from bootcache_core.warmup.bytecode import NullBytecodeCache


class TestProviderRegistry:
    """Tests for ProviderRegistry."""

    def test_resolve_memoizes(self) -> None:
        """Providers are called once."""
        provider = MagicMock(return_value=object())
        registry = ProviderRegistry()
        registry.register("thing", provider)

        assert registry.resolve("thing") is registry.resolve("thing")
        provider.assert_called_once_with()

    def test_register_replaces(self) -> None:
        """Re-registering drops the memoized instance."""
        registry = ProviderRegistry()
        registry.register("thing", lambda: 1)
        registry.resolve("thing")
        registry.register("thing", lambda: 2)

        assert registry.resolve("thing") == 2

    def test_missing_capability(self) -> None:
        """Unknown capabilities are configuration errors."""
        with pytest.raises(ConfigurationError, match="No provider registered"):
            ProviderRegistry().resolve("thing")


class TestLoadProvider:
    """Tests for load_provider."""

    def test_imports_attribute(self) -> None:
        """module:attribute paths are imported."""
        assert load_provider("pathlib:Path") is Path

    @pytest.mark.parametrize("path", ["pathlib", ":Path", "pathlib:"])
    def test_malformed(self, path: str) -> None:
        """Paths without both parts are rejected."""
        with pytest.raises(CompilerUnavailable, match="Expected 'module:attribute'"):
            load_provider(path)

    @pytest.mark.parametrize("path", ["no_such_module_xyz:build", "pathlib:NoSuchThing"])
    def test_unimportable(self, path: str) -> None:
        """Import failures are reported as an unavailable compiler."""
        with pytest.raises(CompilerUnavailable, match="Unable to load compiler provider"):
            load_provider(path)

    def test_not_callable(self) -> None:
        """Providers must be callable."""
        with pytest.raises(CompilerUnavailable, match="not callable"):
            load_provider("os:sep")


class TestBuildRegistry:
    """Tests for build_registry and the resolve helpers."""

    def test_without_compiler(self, tmp_path: Path) -> None:
        """Without a configured compiler, warmup cannot compile."""
        registry = build_registry(BootcacheConfig(paths=PathsConfig(base_path=tmp_path)))

        assert not registry.has(COMPILER)
        with pytest.raises(CompilerUnavailable, match="does not support compilation"):
            resolve_compiler(registry)

    def test_bytecode_cache_from_config(self, tmp_path: Path) -> None:
        """The configured bytecode cache mode is honored."""
        config = BootcacheConfig(
            paths=PathsConfig(base_path=tmp_path),
            warmup=WarmupConfig(bytecode_cache=BytecodeCacheMode.NONE),
        )
        assert isinstance(resolve_bytecode_cache(build_registry(config)), NullBytecodeCache)

    def test_compiler_from_config(self, tmp_path: Path) -> None:
        """A configured provider is loaded and called to build the compiler."""
        config = BootcacheConfig(
            paths=PathsConfig(base_path=tmp_path),
            warmup=WarmupConfig(compiler="unittest.mock:MagicMock"),
        )

        compiler = resolve_compiler(build_registry(config))

        assert callable(compiler.compile)

    def test_compiler_without_compile(self) -> None:
        """Providers returning objects without compile() are rejected."""
        registry = ProviderRegistry()
        registry.register(COMPILER, object)

        with pytest.raises(CompilerUnavailable):
            resolve_compiler(registry)
