"""Compiled artifact validation.

After a build (or a skipped build) the artifact on disk must be importable
and define the compiled container class, extending the expected base
contract.
"""

from __future__ import annotations

import hashlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

import structlog

from bootcache_core.errors import ArtifactInvalid, ArtifactMissing
from bootcache_core.warmup.contracts import ContainerContract

logger = structlog.get_logger(__name__)


class ArtifactValidator:
    """Confirms a compiled artifact is structurally usable.

    Attributes:
        entry_point: Class name the artifact must define
        base_contract: Class the entry point must extend

    Example:
        >>> validator = ArtifactValidator()
        >>> container_class = validator.validate(Path("storage/cache/container.py"))
    """

    def __init__(
        self,
        entry_point: str = "CompiledContainer",
        base_contract: type = ContainerContract,
    ) -> None:
        """Initialize the validator.

        Args:
            entry_point: Compiled class name.
            base_contract: Required base class.
        """
        self.entry_point = entry_point
        self.base_contract = base_contract
        self._log = logger.bind(component="artifact_validator")

    def validate(self, cache_file: Path) -> type:
        """Load the artifact and check its entry point.

        Args:
            cache_file: Compiled artifact path.

        Returns:
            The compiled container class.

        Raises:
            ArtifactMissing: If the file does not exist.
            ArtifactInvalid: If it cannot be loaded or the entry point is
                absent or does not extend the base contract.
        """
        if not cache_file.is_file():
            raise ArtifactMissing(str(cache_file))

        module = self._load(cache_file)
        candidate = getattr(module, self.entry_point, None)

        if (
            not isinstance(candidate, type)
            or candidate is self.base_contract
            or not issubclass(candidate, self.base_contract)
        ):
            raise ArtifactInvalid(
                str(cache_file),
                self.entry_point,
                internal_details=f"expected subclass of {self.base_contract.__qualname__}, "
                f"got {candidate!r}",
            )

        self._log.info("artifact_valid", cache_file=str(cache_file), entry_point=self.entry_point)
        return candidate

    def _load(self, cache_file: Path) -> ModuleType:
        digest = hashlib.sha256(str(cache_file.resolve()).encode("utf-8")).hexdigest()[:12]
        module_name = f"_bootcache_compiled_{digest}"

        spec = importlib.util.spec_from_file_location(module_name, cache_file)
        if spec is None or spec.loader is None:
            raise ArtifactInvalid(
                str(cache_file), self.entry_point, internal_details="no import spec for artifact"
            )

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise ArtifactInvalid(
                str(cache_file),
                self.entry_point,
                internal_details=f"{type(e).__name__}: {e}",
            ) from e
        finally:
            sys.modules.pop(module_name, None)
        return module
