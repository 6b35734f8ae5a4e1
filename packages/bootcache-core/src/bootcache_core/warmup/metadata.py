"""Metadata sidecar for compiled artifacts.

Compilers write a small JSON document next to the artifact
(``container.py`` -> ``container.meta.json``). Reading it never imports or
parses the generated artifact itself.
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog
from pydantic import ValidationError as PydanticValidationError

from bootcache_core.fileio import write_locked
from bootcache_core.warmup.models import ArtifactMetadata

logger = structlog.get_logger(__name__)

METADATA_SUFFIX = ".meta.json"


def metadata_path_for(cache_file: Path) -> Path:
    """Return the sidecar path for a compiled artifact."""
    return cache_file.with_name(cache_file.stem + METADATA_SUFFIX)


def read_artifact_metadata(cache_file: Path) -> ArtifactMetadata | None:
    """Read the metadata sidecar of a compiled artifact.

    Args:
        cache_file: Compiled artifact path.

    Returns:
        None when the artifact does not exist. Empty metadata when the
        artifact exists but its sidecar is missing or unusable.
    """
    if not cache_file.is_file():
        return None

    sidecar = metadata_path_for(cache_file)
    if not sidecar.is_file():
        logger.debug("metadata_sidecar_missing", sidecar=str(sidecar))
        return ArtifactMetadata()

    try:
        return ArtifactMetadata.model_validate(json.loads(sidecar.read_text(encoding="utf-8")))
    except (OSError, ValueError, PydanticValidationError) as e:
        logger.warning("metadata_sidecar_unreadable", sidecar=str(sidecar), error=str(e))
        return ArtifactMetadata()


def write_artifact_metadata(cache_file: Path, metadata: ArtifactMetadata) -> Path:
    """Write the metadata sidecar for ``cache_file``.

    Intended for compiler implementations.

    Args:
        cache_file: Compiled artifact path.
        metadata: Metadata to persist.

    Returns:
        Sidecar path.
    """
    sidecar = metadata_path_for(cache_file)
    sidecar.parent.mkdir(parents=True, exist_ok=True)
    payload = metadata.model_dump(mode="json", exclude_none=True)
    return write_locked(sidecar, json.dumps(payload, indent=2) + "\n")
