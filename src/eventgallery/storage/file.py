"""File-backed key/value backend: one file per key in a directory."""

import errno
import os
import re
import tempfile
from pathlib import Path

from ..errors import PersistenceError, PersistenceQuotaExceeded
from ..logging_config import get_logger
from .base import KeyValueStore

logger = get_logger(__name__)

VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")

# Write failures that mean the device is out of space
QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class FileKeyValueStore(KeyValueStore):
    """
    Stores each key as ``<directory>/<key>.blob``.

    Writes go to a temporary file that replaces the target, so a failed
    write never leaves a half-written value behind.
    """

    SUFFIX = ".blob"

    def __init__(self, directory: str | Path, quota_bytes: int | None = None) -> None:
        super().__init__(quota_bytes)
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.info("file_store_initialized", directory=str(self.directory), quota_bytes=quota_bytes)

    def _path_for(self, key: str) -> Path:
        if not VALID_KEY.match(key):
            raise ValueError(f"Invalid storage key '{key}'")
        return self.directory / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(
                f"Failed to read '{key}': {e}",
                code="read_failed",
                details={"key": key, "path": str(path)},
                original_exception=e,
            ) from e

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(
                f"Failed to delete '{key}': {e}",
                code="delete_failed",
                details={"key": key, "path": str(path)},
                original_exception=e,
            ) from e
        logger.debug("file_store_deleted", key=key)

    def _write(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        fd, temp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.directory)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, path)
        except OSError as e:
            Path(temp_name).unlink(missing_ok=True)
            if e.errno in QUOTA_ERRNOS:
                raise PersistenceQuotaExceeded(key, len(value), self.quota_bytes, original_exception=e) from e
            raise PersistenceError(
                f"Failed to write '{key}': {e}",
                code="write_failed",
                details={"key": key, "path": str(path)},
                original_exception=e,
            ) from e

        logger.debug("file_store_written", key=key, size=len(value))

    def _size_excluding(self, key: str) -> int:
        excluded = self._path_for(key)
        return sum(
            path.stat().st_size
            for path in self.directory.glob(f"*{self.SUFFIX}")
            if path != excluded and path.is_file()
        )
