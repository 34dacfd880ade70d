"""In-process key/value backend."""

from .base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Keeps values in a dict. Nothing survives the process."""

    def __init__(self, quota_bytes: int | None = None, initial: dict[str, bytes] | None = None) -> None:
        super().__init__(quota_bytes)
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def _write(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def _size_excluding(self, key: str) -> int:
        return sum(len(value) for name, value in self._data.items() if name != key)

    def keys(self) -> list[str]:
        return sorted(self._data)
