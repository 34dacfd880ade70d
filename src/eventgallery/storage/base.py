"""
Durable key/value interface used by the photo and settings stores.

A backend stores opaque byte values under string keys and enforces an
optional quota on the total size of all stored values, the way browser
local storage does for a single origin.
"""

from abc import ABC, abstractmethod

from ..errors import PersistenceQuotaExceeded
from ..logging_config import get_logger

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """Base class for durable key/value backends."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        """
        Args:
            quota_bytes: Maximum total size of stored values, None for no limit
        """
        self.quota_bytes = quota_bytes

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the value stored under ``key``, or None when absent."""

    def put(self, key: str, value: bytes) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises:
            PersistenceQuotaExceeded: If the write would exceed the quota
            PersistenceError: If the backend fails to write
        """
        if self.quota_bytes is not None:
            required = self._size_excluding(key) + len(value)
            if required > self.quota_bytes:
                logger.debug("kv_quota_check_failed", key=key, required_bytes=required, quota_bytes=self.quota_bytes)
                raise PersistenceQuotaExceeded(key, required, self.quota_bytes)

        self._write(key, value)

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove ``key``; absent keys are ignored.

        Raises:
            PersistenceError: If the backend fails to delete
        """

    @abstractmethod
    def _write(self, key: str, value: bytes) -> None:
        """Write without quota checks."""

    @abstractmethod
    def _size_excluding(self, key: str) -> int:
        """Total size of stored values other than ``key``."""

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self) -> "KeyValueStore":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()
