"""Ingestion of selected files into the photo store."""

from collections.abc import Iterable
from datetime import datetime

from ..logging_config import get_logger, log_performance
from .photo_store import PhotoStore
from .transcoder import BatchResult, ImageTranscoder, get_transcoder

logger = get_logger(__name__)


def ingest_files(
    files: Iterable[tuple[str, bytes]],
    photo_store: PhotoStore,
    transcoder: ImageTranscoder | None = None,
) -> BatchResult:
    """
    Transcode a batch of selected files and add the results to the store.

    Files are processed one at a time in selection order. Files that fail to
    decode are reported in the result; the rest are added in a single merge.

    Args:
        files: (filename, bytes) pairs in selection order
        photo_store: Store receiving the new records
        transcoder: Transcoder to use (defaults to the global instance)

    Returns:
        BatchResult: Added records and failed files
    """
    start_time = datetime.now()
    transcoder = transcoder or get_transcoder()

    result = transcoder.transcode_batch(files)
    if result.records:
        photo_store.add_photos(result.records)

    duration = (datetime.now() - start_time).total_seconds()
    log_performance("ingest_files", duration, **result.to_dict())

    if result.failures:
        logger.warning(
            "ingest_partially_failed" if result.records else "ingest_failed",
            failed_files=[failure.filename for failure in result.failures],
            success_count=result.success_count,
        )
    else:
        logger.info("ingest_completed", success_count=result.success_count, photo_count=len(photo_store))

    return result
