"""Settings store for eventgallery: title and banner, persisted best effort."""

import json
from collections.abc import Mapping
from typing import Any

from ..config import get_default_banner, get_default_title
from ..errors import PersistenceCorrupt, PersistenceError
from ..logging_config import get_logger
from ..models.settings import FIELD_NAMES, GallerySettings
from ..storage.base import KeyValueStore

logger = get_logger(__name__)

SETTINGS_KEY = "event_settings"


def default_settings() -> GallerySettings:
    """Settings used until the operator changes them."""
    return GallerySettings(title=get_default_title(), banner_payload=get_default_banner())


class SettingsStore:
    """Holds the gallery settings singleton."""

    def __init__(
        self,
        backend: KeyValueStore,
        key: str = SETTINGS_KEY,
        defaults: GallerySettings | None = None,
    ) -> None:
        self.backend = backend
        self.key = key
        self.defaults = defaults or default_settings()
        self._settings = self._load()

    def _load(self) -> GallerySettings:
        try:
            data = self.backend.get(self.key)
            if data is None:
                return self.defaults
            try:
                return GallerySettings.from_dict(json.loads(data.decode("utf-8")), self.defaults)
            except (UnicodeDecodeError, json.JSONDecodeError, TypeError) as e:
                raise PersistenceCorrupt(self.key, str(e), original_exception=e) from e
        except PersistenceError as e:
            logger.warning("settings_load_failed", key=self.key, code=e.code)
            return self.defaults

    def get(self) -> GallerySettings:
        return self._settings

    def update(self, partial: Mapping[str, Any] | None = None, **fields: Any) -> GallerySettings:
        """
        Merge the given fields into the settings and persist.

        Fields can be passed as keyword arguments (``title``,
        ``banner_payload``) or as a mapping using the serialized names
        (``title``, ``bannerPayload``). Omitted fields are unchanged.

        Returns:
            GallerySettings: The updated settings
        """
        changes = dict(fields)
        for name, value in (partial or {}).items():
            if name not in FIELD_NAMES:
                raise TypeError(f"Unknown settings field '{name}'")
            changes[FIELD_NAMES[name]] = value

        self._settings = self._settings.merged(**changes)
        logger.info("settings_updated", fields=sorted(name for name, value in changes.items() if value is not None))
        self._persist()
        return self._settings

    def _persist(self) -> None:
        data = json.dumps(self._settings.to_dict(), ensure_ascii=False).encode("utf-8")
        try:
            self.backend.put(self.key, data)
        except PersistenceError as e:
            logger.warning("settings_persist_failed", key=self.key, code=e.code)

    def reset(self) -> GallerySettings:
        """
        Return to the default settings and drop the stored copy.

        Returns:
            GallerySettings: The defaults now in effect
        """
        self._settings = self.defaults
        logger.info("settings_reset")
        try:
            self.backend.delete(self.key)
        except PersistenceError as e:
            logger.warning("settings_delete_failed", key=self.key, code=e.code)
        return self._settings
