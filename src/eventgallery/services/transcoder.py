"""Image transcoding service for eventgallery."""

import io
import math
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime

from PIL import Image, ImageOps

from ..errors import DecodeError, EncodeError, TranscodeError
from ..logging_config import get_logger, log_performance
from ..models.photo import PhotoRecord, generate_photo_id, to_data_url

try:
    from pillow_heif import register_heif_opener  # type: ignore[import-untyped]

    register_heif_opener()
    HEIF_AVAILABLE = True
except ImportError:
    HEIF_AVAILABLE = False

logger = get_logger(__name__)

# Longest side of a stored photo, in pixels
MAX_DIMENSION = 1600

# Fixed JPEG quality; trades file size against visible artifacts
JPEG_QUALITY = 80

# Offset between consecutive photos of one batch so they keep selection order
BATCH_TIME_STEP_MS = 10

OUTPUT_MIME_TYPE = "image/jpeg"


def current_time_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_target_size(original_size: tuple[int, int], max_dimension: int = MAX_DIMENSION) -> tuple[int, int]:
    """
    Calculate the stored size of an image, preserving aspect ratio.

    Images whose longest side already fits are left alone; larger ones are
    scaled down so the longest side equals ``max_dimension``.

    Args:
        original_size: Source size as (width, height)
        max_dimension: Maximum allowed length of the longest side

    Returns:
        tuple: Target size as (width, height)
    """
    width, height = original_size
    longest = max(width, height)

    if longest <= max_dimension:
        return (width, height)

    scale = max_dimension / longest
    if width >= height:
        return (max_dimension, max(1, _round_half_up(height * scale)))
    return (max(1, _round_half_up(width * scale)), max_dimension)


@dataclass
class BatchFailure:
    """A file from a batch that could not be transcoded."""

    filename: str
    error: TranscodeError

    @property
    def message(self) -> str:
        return self.error.user_message


@dataclass
class BatchResult:
    """Outcome of transcoding a batch of files, in input order."""

    records: list[PhotoRecord] = field(default_factory=list)
    failures: list[BatchFailure] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.records)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def is_partial(self) -> bool:
        """True when some, but not all, files failed."""
        return bool(self.failures) and bool(self.records)

    @property
    def is_complete_failure(self) -> bool:
        return bool(self.failures) and not self.records

    def to_dict(self) -> dict:
        return {
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "is_partial": self.is_partial,
            "failed_files": [failure.filename for failure in self.failures],
        }


class ImageTranscoder:
    """Turns arbitrary input images into bounded JPEG photo records."""

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        """
        Args:
            clock: Returns the current time in milliseconds (defaults to wall clock)
        """
        self.clock = clock or current_time_ms

        if not HEIF_AVAILABLE:
            logger.warning("heif_support_unavailable", message="Install pillow-heif for HEIC support")

    def _decode(self, source_bytes: bytes, source_filename: str) -> Image.Image:
        if not source_bytes:
            raise DecodeError(f"File '{source_filename}' is empty", filename=source_filename)

        try:
            with Image.open(io.BytesIO(source_bytes)) as image:
                image.load()
                # Apply EXIF orientation so width/height match what viewers see
                return ImageOps.exif_transpose(image)
        except Exception as e:
            raise DecodeError(
                f"Cannot decode '{source_filename}' as an image: {e}",
                filename=source_filename,
                details={"file_size": len(source_bytes)},
                original_exception=e,
            ) from e

    def _encode(self, image: Image.Image, target_size: tuple[int, int], source_filename: str) -> bytes:
        try:
            if image.mode not in ("RGB", "L"):
                image = image.convert("RGB")

            if image.size != target_size:
                image = image.resize(target_size, Image.Resampling.LANCZOS)

            buffer = io.BytesIO()
            image.save(buffer, format="JPEG", quality=JPEG_QUALITY, optimize=True)
            return buffer.getvalue()
        except Exception as e:
            raise EncodeError(
                f"Failed to encode '{source_filename}' as JPEG: {e}",
                filename=source_filename,
                details={"target_size": target_size},
                original_exception=e,
            ) from e

    def transcode(self, source_bytes: bytes, source_filename: str, captured_at: int | None = None) -> PhotoRecord:
        """
        Decode, resize and re-encode one image into a photo record.

        Args:
            source_bytes: Raw bytes of the selected file
            source_filename: Name of the selected file
            captured_at: Timestamp in ms to assign (defaults to the clock)

        Returns:
            PhotoRecord: New record with a fresh id

        Raises:
            DecodeError: If the bytes are not a readable image
            EncodeError: If the image cannot be re-encoded
        """
        start_time = datetime.now()

        image = self._decode(source_bytes, source_filename)
        original_size = image.size
        target_size = calculate_target_size(original_size)
        jpeg_data = self._encode(image, target_size, source_filename)

        record = PhotoRecord(
            id=generate_photo_id(),
            payload=to_data_url(jpeg_data, OUTPUT_MIME_TYPE),
            captured_at=self.clock() if captured_at is None else captured_at,
            width=target_size[0],
            height=target_size[1],
            source_name=source_filename,
        )

        duration = (datetime.now() - start_time).total_seconds()
        log_performance(
            "transcode",
            duration,
            filename=source_filename,
            original_size=original_size,
            target_size=target_size,
            original_file_size=len(source_bytes),
            encoded_file_size=len(jpeg_data),
        )

        return record

    def transcode_batch(self, files: Iterable[tuple[str, bytes]]) -> BatchResult:
        """
        Transcode files one after another in input order.

        The i-th file is stamped ``batch start - i * BATCH_TIME_STEP_MS`` so
        that, sorted most recent first, the batch reads in selection order.
        A file that fails is recorded in the result and skipped.

        Args:
            files: (filename, bytes) pairs in selection order

        Returns:
            BatchResult: Records and failures, both in input order
        """
        result = BatchResult()
        batch_start = self.clock()

        for index, (filename, data) in enumerate(files):
            try:
                record = self.transcode(data, filename, captured_at=batch_start - index * BATCH_TIME_STEP_MS)
            except TranscodeError as e:
                logger.warning("batch_item_skipped", filename=filename, index=index, code=e.code)
                result.failures.append(BatchFailure(filename=filename, error=e))
                continue
            result.records.append(record)

        logger.info("batch_transcoded", **result.to_dict())
        return result

    def encode_banner(self, source_bytes: bytes, source_filename: str) -> str:
        """
        Validate a banner image and wrap it as a data URL without transcoding.

        Raises:
            DecodeError: If the bytes are not a readable image
        """
        if not source_bytes:
            raise DecodeError(f"File '{source_filename}' is empty", filename=source_filename)

        try:
            with Image.open(io.BytesIO(source_bytes)) as image:
                image.verify()
                mime_type = Image.MIME.get(image.format or "", "application/octet-stream")
        except Exception as e:
            raise DecodeError(
                f"Cannot decode banner '{source_filename}': {e}",
                filename=source_filename,
                original_exception=e,
            ) from e

        logger.info("banner_encoded", filename=source_filename, mime_type=mime_type, file_size=len(source_bytes))
        return to_data_url(source_bytes, mime_type)


_transcoder: ImageTranscoder | None = None


def get_transcoder() -> ImageTranscoder:
    """Get the global transcoder instance."""
    global _transcoder
    if _transcoder is None:
        _transcoder = ImageTranscoder()
    return _transcoder
