"""
Photo store for eventgallery.

The store owns the authoritative, most-recent-first sequence of photo
records. After every mutation the whole sequence is mirrored to the durable
key/value backend; when that write is rejected only the newest records are
mirrored, and if even that fails the session carries on from memory.
"""

import json
from collections.abc import Iterable

from ..errors import PersistenceCorrupt, PersistenceError
from ..logging_config import get_logger
from ..models.photo import PhotoRecord
from ..storage.base import KeyValueStore

logger = get_logger(__name__)

PHOTOS_KEY = "event_photos"

# Records kept in the durable mirror when the full sequence does not fit
FALLBACK_RECORD_LIMIT = 50


def sort_most_recent_first(records: Iterable[PhotoRecord]) -> list[PhotoRecord]:
    """Stable sort by capture time, newest first."""
    return sorted(records, key=lambda record: record.captured_at, reverse=True)


def serialize_photos(records: Iterable[PhotoRecord]) -> bytes:
    """Serialize records to the UTF-8 JSON layout of ``event_photos``."""
    return json.dumps([record.to_dict() for record in records], ensure_ascii=False).encode("utf-8")


def deserialize_photos(data: bytes, key: str = PHOTOS_KEY) -> list[PhotoRecord]:
    """
    Parse the ``event_photos`` layout.

    Raises:
        PersistenceCorrupt: If the blob is not a JSON array of photo records
    """
    try:
        items = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PersistenceCorrupt(key, f"invalid JSON: {e}", original_exception=e) from e

    if not isinstance(items, list):
        raise PersistenceCorrupt(key, f"expected an array, got {type(items).__name__}")

    try:
        return [PhotoRecord.from_dict(item) for item in items]
    except (KeyError, TypeError) as e:
        raise PersistenceCorrupt(key, f"invalid photo record: {e}", original_exception=e) from e


class PhotoStore:
    """Ordered, durable collection of photo records."""

    def __init__(
        self,
        backend: KeyValueStore,
        key: str = PHOTOS_KEY,
        fallback_limit: int = FALLBACK_RECORD_LIMIT,
    ) -> None:
        """
        Initialize the store and seed it from the durable mirror.

        Args:
            backend: Durable key/value backend
            key: Key of the photo blob
            fallback_limit: Records to mirror when the full write fails
        """
        self.backend = backend
        self.key = key
        self.fallback_limit = fallback_limit
        self._photos: list[PhotoRecord] = self._load()

        logger.info("photo_store_initialized", key=key, photo_count=len(self._photos))

    def _load(self) -> list[PhotoRecord]:
        try:
            data = self.backend.get(self.key)
            if data is None:
                return []
            records = deserialize_photos(data, self.key)
        except PersistenceError as e:
            # PersistenceCorrupt lands here too; the error logged itself
            logger.warning("photo_store_load_failed", key=self.key, code=e.code)
            return []

        # Drop duplicate ids, keeping the first occurrence
        seen: set[str] = set()
        unique = []
        for record in records:
            if record.id in seen:
                continue
            seen.add(record.id)
            unique.append(record)

        return sort_most_recent_first(unique)

    def _persist(self) -> bool:
        """
        Mirror the current sequence to the backend.

        Returns:
            True if the full sequence was written
        """
        try:
            self.backend.put(self.key, serialize_photos(self._photos))
            logger.debug("photos_persisted", key=self.key, photo_count=len(self._photos))
            return True
        except PersistenceError as e:
            logger.warning(
                "photos_persist_failed",
                key=self.key,
                code=e.code,
                photo_count=len(self._photos),
                fallback_limit=self.fallback_limit,
            )

        if len(self._photos) <= self.fallback_limit:
            return False

        recent = self._photos[: self.fallback_limit]
        try:
            self.backend.put(self.key, serialize_photos(recent))
            logger.warning("photos_persisted_truncated", key=self.key, persisted_count=len(recent))
        except PersistenceError as e:
            logger.error("photos_fallback_persist_failed", key=self.key, code=e.code, persisted_count=len(recent))

        return False

    def add_photos(self, new_records: Iterable[PhotoRecord]) -> None:
        """
        Merge new records into the collection and persist.

        The result is a stable sort of ``new_records + existing`` by capture
        time, newest first, so equal timestamps keep that concatenation order.
        Records whose id is already present are ignored.

        Args:
            new_records: Records to add, in batch order
        """
        known_ids = {record.id for record in self._photos}
        accepted = []
        for record in new_records:
            if record.id in known_ids:
                logger.warning("duplicate_photo_id_ignored", photo_id=record.id, source_name=record.source_name)
                continue
            known_ids.add(record.id)
            accepted.append(record)

        if not accepted:
            return

        self._photos = sort_most_recent_first(accepted + self._photos)
        logger.info("photos_added", added_count=len(accepted), photo_count=len(self._photos))
        self._persist()

    def delete_photo(self, photo_id: str) -> None:
        """
        Remove a photo by id. Unknown ids are ignored.

        Args:
            photo_id: Id of the photo to remove
        """
        remaining = [record for record in self._photos if record.id != photo_id]
        if len(remaining) == len(self._photos):
            logger.debug("photo_delete_not_found", photo_id=photo_id)
            return

        self._photos = remaining
        logger.info("photo_deleted", photo_id=photo_id, photo_count=len(self._photos))
        self._persist()

    def clear(self) -> None:
        """Remove every photo and the stored copy. An absent key loads as an empty store."""
        self._photos = []
        logger.info("photos_cleared")
        try:
            self.backend.delete(self.key)
        except PersistenceError as e:
            logger.warning("photos_delete_failed", key=self.key, code=e.code)

    def list(self) -> tuple[PhotoRecord, ...]:
        """Snapshot of all photos, most recent first."""
        return tuple(self._photos)

    def get(self, photo_id: str) -> PhotoRecord | None:
        for record in self._photos:
            if record.id == photo_id:
                return record
        return None

    def latest_captured_at(self) -> int | None:
        """Capture time of the newest photo, None when empty."""
        return self._photos[0].captured_at if self._photos else None

    def __len__(self) -> int:
        return len(self._photos)
