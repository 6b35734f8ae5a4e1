"""Locked, all-or-nothing file writes.

Metrics, preload scripts and benchmark exports are written through
write_locked(): the content is fully buffered by the caller, an exclusive
flock is held on a lock file under the system temp directory, the bytes land
in a temporary file in the same directory and are moved into place with
os.replace(). No lock file is left beside the destination. A concurrent
reader sees either the previous file or the new one, never a partial write.
"""

from __future__ import annotations

import fcntl
import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from bootcache_core.errors import EncodingFailure

DEFAULT_FILE_MODE = 0o644
LOCK_DIR_NAME = "bootcache-locks"


def encode_json(payload: dict[str, Any], indent: int = 4) -> str:
    """Encode a payload as indented JSON with a trailing newline.

    Raises:
        EncodingFailure: If a value is not representable (NaN, infinity,
            unsupported types).
    """
    try:
        return json.dumps(payload, indent=indent, allow_nan=False) + "\n"
    except (TypeError, ValueError) as e:
        raise EncodingFailure("Unable to encode payload as JSON", internal_details=str(e)) from e


def lock_path_for(path: Path) -> Path:
    """Return the lock file used to serialize writers of ``path``.

    Lock files live in one directory under the system temp directory, keyed
    by a hash of the absolute destination path.
    """
    digest = hashlib.sha256(str(path.absolute()).encode("utf-8")).hexdigest()[:32]
    return Path(tempfile.gettempdir()) / LOCK_DIR_NAME / f"{digest}.lock"


def write_locked(path: Path, content: str, mode: int = DEFAULT_FILE_MODE) -> Path:
    """Write text to ``path`` atomically under an exclusive lock.

    Args:
        path: Destination file. Its parent directory must exist.
        content: Complete file content.
        mode: Permission bits applied before the file becomes visible.

    Returns:
        The destination path.

    Raises:
        OSError: If the lock, temporary file or rename fails.
    """
    lock_file = lock_path_for(path)
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    lock_file.touch(exist_ok=True)

    with lock_file.open("r+") as lock:
        fcntl.flock(lock, fcntl.LOCK_EX)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(content)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.chmod(tmp_name, mode)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        finally:
            fcntl.flock(lock, fcntl.LOCK_UN)

    return path
