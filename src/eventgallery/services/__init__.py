"""
Services module for eventgallery.

This module contains the service classes that handle business logic:
- ImageTranscoder: Decode, bound and re-encode photos
- PhotoStore: Ordered photo collection with durable mirror
- SettingsStore: Title and banner singleton
- distribute: Round-robin column layout for the gallery
- ingest_files: Selected files to stored photos
"""

from .gallery import column_count_for_width, distribute
from .ingest import ingest_files
from .photo_store import PhotoStore
from .settings_store import SettingsStore
from .transcoder import BatchFailure, BatchResult, ImageTranscoder, calculate_target_size, get_transcoder

__all__ = [
    "ImageTranscoder",
    "BatchResult",
    "BatchFailure",
    "calculate_target_size",
    "get_transcoder",
    "PhotoStore",
    "SettingsStore",
    "distribute",
    "column_count_for_width",
    "ingest_files",
]
