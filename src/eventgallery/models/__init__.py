"""
Models module for eventgallery.

This module contains the data models shared by the services:
- PhotoRecord: A transcoded photo and its display metadata
- GallerySettings: Event title and banner singleton
"""

from .photo import PhotoRecord, from_data_url, generate_photo_id, to_data_url
from .settings import GallerySettings

__all__ = [
    "PhotoRecord",
    "GallerySettings",
    "generate_photo_id",
    "to_data_url",
    "from_data_url",
]
