"""Builds the configured durable key/value backend."""

from pathlib import Path

from ..config import get_storage_backend, get_storage_path, get_storage_quota
from ..logging_config import get_logger
from .base import KeyValueStore
from .duckdb_store import DuckDBKeyValueStore
from .file import FileKeyValueStore
from .memory import InMemoryKeyValueStore

logger = get_logger(__name__)

DUCKDB_FILENAME = "gallery.duckdb"


def build_key_value_store(
    backend: str | None = None,
    storage_path: str | None = None,
    quota_bytes: int | None = None,
) -> KeyValueStore:
    """
    Create a key/value backend from arguments or configuration.

    Args:
        backend: "file", "duckdb" or "memory" (defaults to GALLERY_STORAGE_BACKEND)
        storage_path: Directory for persistent backends (defaults to GALLERY_STORAGE_PATH)
        quota_bytes: Storage quota (defaults to GALLERY_STORAGE_QUOTA_BYTES)

    Returns:
        KeyValueStore: The backend instance
    """
    backend = backend or get_storage_backend()
    storage_path = storage_path or get_storage_path()
    if quota_bytes is None:
        quota_bytes = get_storage_quota()

    logger.info("building_key_value_store", backend=backend, storage_path=storage_path, quota_bytes=quota_bytes)

    if backend == "memory":
        return InMemoryKeyValueStore(quota_bytes=quota_bytes)
    if backend == "duckdb":
        return DuckDBKeyValueStore(Path(storage_path) / DUCKDB_FILENAME, quota_bytes=quota_bytes)
    if backend == "file":
        return FileKeyValueStore(storage_path, quota_bytes=quota_bytes)

    raise ValueError(f"Unknown storage backend '{backend}'")
