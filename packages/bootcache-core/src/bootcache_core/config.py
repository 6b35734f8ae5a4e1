"""Configuration models for bootcache.

Configuration is layered: built-in defaults, then ``bootcache.yaml`` in the
base path (if present), then environment variables, then CLI flags.

Environment:
    BOOTCACHE_BASE_PATH: Application base path (defaults to the cwd).
    BOOTCACHE_COMPILER: Compiler provider import path ("module:factory").
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from bootcache_core.errors import ConfigurationError

BASE_PATH_ENV_VAR = "BOOTCACHE_BASE_PATH"
COMPILER_ENV_VAR = "BOOTCACHE_COMPILER"

CONFIG_FILE_NAME = "bootcache.yaml"
DEFAULT_CACHE_DIR = Path("storage") / "cache"

CONTAINER_CACHE_FILE_NAME = "container.py"
PRELOAD_FILE_NAME = "preload.py"
METRICS_FILE_NAME = "container-metrics.json"
METADATA_FILE_NAME = "container.meta.json"

CLEAR_STEPS = ("cache-clear-config", "cache-clear-routes", "cache-clear-container")
BUILD_STEPS = ("cache-build-config", "cache-build-routes", "cache-build-container")

SUPPORTED_EXPORT_SUFFIXES = (".json", ".csv")


def get_base_path() -> Path:
    """Get the application base path from the environment.

    Returns:
        BOOTCACHE_BASE_PATH if set, otherwise the current working directory.
    """
    raw = os.environ.get(BASE_PATH_ENV_VAR, "").strip()
    return Path(raw) if raw else Path.cwd()


class BytecodeCacheMode(str, Enum):
    """Which bytecode cache implementation warmup uses.

    Attributes:
        AUTO: pyc when the interpreter writes bytecode, otherwise none
        PYC: Always compile .pyc files
        NONE: Never touch the bytecode cache
    """

    AUTO = "auto"
    PYC = "pyc"
    NONE = "none"


class PathsConfig(BaseModel):
    """Filesystem layout of the startup caches.

    Attributes:
        base_path: Application base path
        cache_dir: Cache directory, relative to base_path unless absolute

    Example:
        >>> paths = PathsConfig(base_path=Path("/srv/app"))
        >>> paths.container_cache_file
        PosixPath('/srv/app/storage/cache/container.py')
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_path: Path = Field(default_factory=get_base_path, description="Application base path")
    cache_dir: Path = Field(default=DEFAULT_CACHE_DIR, description="Cache directory")

    @property
    def resolved_cache_dir(self) -> Path:
        """Cache directory resolved against the base path."""
        if self.cache_dir.is_absolute():
            return self.cache_dir
        return self.base_path / self.cache_dir

    @property
    def container_cache_file(self) -> Path:
        """Compiled container artifact."""
        return self.resolved_cache_dir / CONTAINER_CACHE_FILE_NAME

    @property
    def preload_file(self) -> Path:
        """Preload script regenerated by every warmup."""
        return self.resolved_cache_dir / PRELOAD_FILE_NAME

    @property
    def metrics_file(self) -> Path:
        """Warmup metrics side file."""
        return self.resolved_cache_dir / METRICS_FILE_NAME

    @property
    def metadata_file(self) -> Path:
        """Metadata sidecar written by the compiler next to the artifact."""
        return self.resolved_cache_dir / METADATA_FILE_NAME

    def resolve(self, path: str | Path) -> Path:
        """Resolve a user-supplied path against the base path.

        Args:
            path: Absolute or base-relative path.

        Returns:
            Absolute paths unchanged, relative ones joined to base_path.
        """
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.base_path / candidate


class WarmupConfig(BaseModel):
    """Configuration for the container warmup.

    Attributes:
        compiler: Import path of the compiler provider ("module:factory")
        entry_point: Class the compiled artifact must define
        bytecode_cache: Bytecode cache implementation to use
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    compiler: str | None = Field(default=None, description="Compiler provider import path")
    entry_point: str = Field(
        default="CompiledContainer", min_length=1, description="Compiled class name"
    )
    bytecode_cache: BytecodeCacheMode = Field(
        default=BytecodeCacheMode.AUTO, description="Bytecode cache mode"
    )


class BenchmarkConfig(BaseModel):
    """Configuration for a startup benchmark.

    Attributes:
        runs: Measured runs per scenario
        warmups: Discarded warmup runs per scenario
        command: Target command, with or without the interpreter/entry prefix
        entry: Console entry script, relative to the base path unless absolute
        compare_cache: Run uncached and cached scenarios back-to-back
        min_improvement: Minimum required improvement in percent
        max_average_ms: Maximum allowed scenario average
        max_p95_ms: Maximum allowed scenario p95
        output: Report destination (.json or .csv)
        timeout_seconds: Optional per-process timeout
        clear_steps: Maintenance subcommands forcing a cold state
        build_steps: Maintenance subcommands forcing a warm state

    Example:
        >>> config = BenchmarkConfig(runs=30, warmups=5, compare_cache=True)
        >>> config.validate_for_run()
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    runs: int = Field(default=20, ge=1, description="Measured runs per scenario")
    warmups: int = Field(default=3, ge=0, description="Warmup runs per scenario")
    command: str = Field(default="--help", description="Command to benchmark")
    entry: str = Field(default="console.py", description="Console entry script")
    compare_cache: bool = Field(default=False, description="Compare uncached vs cached")
    min_improvement: float | None = Field(default=None, description="Minimum improvement (%)")
    max_average_ms: float | None = Field(default=None, description="Maximum average (ms)")
    max_p95_ms: float | None = Field(default=None, description="Maximum p95 (ms)")
    output: str | None = Field(default=None, description="Report path (.json or .csv)")
    timeout_seconds: float | None = Field(default=None, gt=0, description="Process timeout")
    clear_steps: tuple[str, ...] = Field(default=CLEAR_STEPS, description="Cold-state steps")
    build_steps: tuple[str, ...] = Field(default=BUILD_STEPS, description="Warm-state steps")

    def validate_for_run(self) -> None:
        """Check cross-field rules before any process is spawned.

        Raises:
            ConfigurationError: If the output extension is unsupported or a
                minimum improvement is requested without cache comparison.
        """
        if self.output is not None:
            if not self.output.strip():
                raise ConfigurationError("Output path cannot be empty.", field_path="output")
            if Path(self.output).suffix.lower() not in SUPPORTED_EXPORT_SUFFIXES:
                raise ConfigurationError(
                    "Unsupported output format. Use a .json or .csv file extension.",
                    field_path="output",
                )

        if self.min_improvement is not None and not self.compare_cache:
            raise ConfigurationError(
                "Minimum improvement threshold requires --compare-cache mode.",
                field_path="min_improvement",
            )


class BootcacheConfig(BaseModel):
    """Top-level bootcache configuration (bootcache.yaml).

    Attributes:
        paths: Cache layout
        warmup: Warmup settings
        benchmark: Benchmark defaults

    Example:
        >>> config = BootcacheConfig.load()
        >>> config.paths.container_cache_file.name
        'container.py'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    paths: PathsConfig = Field(default_factory=PathsConfig, description="Cache layout")
    warmup: WarmupConfig = Field(default_factory=WarmupConfig, description="Warmup settings")
    benchmark: BenchmarkConfig = Field(
        default_factory=BenchmarkConfig, description="Benchmark defaults"
    )

    @classmethod
    def from_yaml(cls, path: str | Path, base_path: Path | None = None) -> BootcacheConfig:
        """Load and validate configuration from a YAML file.

        Args:
            path: Path to bootcache.yaml.
            base_path: Base path used when the file does not set one.

        Returns:
            Validated BootcacheConfig.

        Raises:
            ConfigurationError: If the file is missing, unparsable or invalid.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"File not found: {path}")

        try:
            with path.open("r") as f:
                raw: Any = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {path}", internal_details=str(e)
            ) from None

        if not isinstance(raw, dict):
            raise ConfigurationError(f"Invalid configuration in {path}: expected a mapping")

        paths = dict(raw.get("paths") or {})
        if base_path is not None:
            paths.setdefault("base_path", base_path)
        raw["paths"] = paths

        try:
            return cls.model_validate(raw)
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {path}:\n{format_validation_error(e)}"
            ) from None

    @classmethod
    def load(cls, config_file: str | Path | None = None) -> BootcacheConfig:
        """Load configuration from file and environment.

        Args:
            config_file: Explicit config file. When None, bootcache.yaml in
                the base path is used if it exists.

        Returns:
            Merged configuration.
        """
        base_path = get_base_path()
        candidate = Path(config_file) if config_file else base_path / CONFIG_FILE_NAME

        if config_file or candidate.exists():
            config = cls.from_yaml(candidate, base_path=base_path)
        else:
            config = cls(paths=PathsConfig(base_path=base_path))

        compiler = os.environ.get(COMPILER_ENV_VAR, "").strip()
        if compiler:
            config = config.model_copy(
                update={"warmup": config.warmup.model_copy(update={"compiler": compiler})}
            )
        return config


def format_validation_error(err: PydanticValidationError) -> str:
    """Format a pydantic validation error as indented ``field: message`` lines."""
    lines: list[str] = []
    for e in err.errors():
        loc = ".".join(str(x) for x in e["loc"])
        lines.append(f"  - {loc}: {e['msg']}")
    return "\n".join(lines)
