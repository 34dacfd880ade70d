"""
Gallery settings model for eventgallery.

The settings are a singleton holding the event title and the banner image
shown above the gallery. Updates merge field by field.
"""

from dataclasses import dataclass, replace
from typing import Any

# Maps serialized field names to attribute names
FIELD_NAMES = {
    "title": "title",
    "bannerPayload": "banner_payload",
}


@dataclass(frozen=True)
class GallerySettings:
    """Event title and banner image reference (URL or data URL)."""

    title: str
    banner_payload: str

    def to_dict(self) -> dict:
        """Convert settings to their serialized dictionary form."""
        return {
            "title": self.title,
            "bannerPayload": self.banner_payload,
        }

    def merged(self, **changes: Any) -> "GallerySettings":
        """
        Return a copy with the given fields replaced.

        Fields passed as None are left untouched.

        Raises:
            TypeError: If an unknown field or a non-string value is given
        """
        updates = {}
        for name, value in changes.items():
            if name not in FIELD_NAMES.values():
                raise TypeError(f"Unknown settings field '{name}'")
            if value is None:
                continue
            if not isinstance(value, str):
                raise TypeError(f"Settings field '{name}' must be a string")
            updates[name] = value

        return replace(self, **updates)

    @classmethod
    def from_dict(cls, data: dict, defaults: "GallerySettings") -> "GallerySettings":
        """
        Create settings from their serialized form.

        Missing fields keep the value from ``defaults``.

        Raises:
            TypeError: If the data is not an object or a field is not a string
        """
        if not isinstance(data, dict):
            raise TypeError("Settings must be an object")

        changes = {FIELD_NAMES[key]: value for key, value in data.items() if key in FIELD_NAMES}
        return defaults.merged(**changes)
