"""
Photo record model for eventgallery.

A PhotoRecord is produced once by the transcoder from a single input file
and never changes afterwards. Its dictionary form uses the field names of
the durable ``event_photos`` layout.
"""

import base64
import binascii
import uuid
from dataclasses import dataclass

DATA_URL_PREFIX = "data:"


def generate_photo_id() -> str:
    """Generate a new opaque photo identifier."""
    return str(uuid.uuid4())


def to_data_url(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a self-contained ``data:`` URL."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def from_data_url(data_url: str) -> bytes:
    """
    Decode a base64 ``data:`` URL back to raw bytes.

    Raises:
        ValueError: If the string is not a base64 data URL
    """
    if not data_url.startswith(DATA_URL_PREFIX):
        raise ValueError("Not a data URL")

    header, _, encoded = data_url.partition(",")
    if not header.endswith(";base64"):
        raise ValueError("Data URL is not base64 encoded")

    try:
        return base64.b64decode(encoded, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def _require_int(data: dict, field: str) -> int:
    value = data[field]
    if isinstance(value, bool):
        raise TypeError(f"Field '{field}' must be an integer")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int):
        raise TypeError(f"Field '{field}' must be an integer")
    return value


def _require_str(data: dict, field: str) -> str:
    value = data[field]
    if not isinstance(value, str):
        raise TypeError(f"Field '{field}' must be a string")
    return value


@dataclass(frozen=True)
class PhotoRecord:
    """
    A transcoded photo ready for display.

    ``width`` and ``height`` describe the encoded payload, not the source
    image. ``captured_at`` is milliseconds since the epoch and decides the
    display order, most recent first.
    """

    id: str
    payload: str
    captured_at: int
    width: int
    height: int
    source_name: str

    def to_dict(self) -> dict:
        """
        Convert the record to its serialized dictionary form.

        Returns:
            Dictionary keyed by the durable field names
        """
        return {
            "id": self.id,
            "payload": self.payload,
            "capturedAt": self.captured_at,
            "width": self.width,
            "height": self.height,
            "sourceName": self.source_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PhotoRecord":
        """
        Create a PhotoRecord from its serialized dictionary form.

        Args:
            data: Dictionary keyed by the durable field names

        Returns:
            PhotoRecord instance

        Raises:
            KeyError: If a field is missing
            TypeError: If a field has the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError("Photo record must be an object")

        return cls(
            id=_require_str(data, "id"),
            payload=_require_str(data, "payload"),
            captured_at=_require_int(data, "capturedAt"),
            width=_require_int(data, "width"),
            height=_require_int(data, "height"),
            source_name=_require_str(data, "sourceName"),
        )

    def payload_bytes(self) -> bytes:
        """Return the encoded image bytes carried in the payload."""
        return from_data_url(self.payload)

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height if self.height else 0.0
