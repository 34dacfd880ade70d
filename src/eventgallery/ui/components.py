"""Reusable UI components for eventgallery."""

from datetime import datetime

import streamlit as st
import structlog

from eventgallery.models.photo import DATA_URL_PREFIX, PhotoRecord, from_data_url
from eventgallery.models.settings import GallerySettings
from eventgallery.services.gallery import distribute

logger = structlog.get_logger(__name__)


def banner_image_source(banner_payload: str) -> str | bytes:
    """Return something ``st.image`` can display for a banner reference."""
    if banner_payload.startswith(DATA_URL_PREFIX):
        try:
            return from_data_url(banner_payload)
        except ValueError as e:
            logger.warning("banner_payload_invalid", error=str(e))
    return banner_payload


def format_captured_at(captured_at: int | None) -> str:
    """Format a millisecond timestamp as HH:MM, or a placeholder."""
    if captured_at is None:
        return "--:--"
    return datetime.fromtimestamp(captured_at / 1000).strftime("%H:%M")


def render_header(settings: GallerySettings) -> None:
    """Render the banner image and event title."""
    if settings.banner_payload:
        st.image(banner_image_source(settings.banner_payload), use_container_width=True)
    st.title(settings.title)


def render_empty_state(title: str, description: str, icon: str = "📭") -> None:
    """Render an empty state message."""
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        st.markdown(
            f"""
        <div style='text-align: center; padding: 2rem 0;'>
            <div style='font-size: 4rem; margin-bottom: 1rem;'>{icon}</div>
            <h3 style='color: #666; margin-bottom: 1rem;'>{title}</h3>
            <p style='color: #888; margin-bottom: 2rem;'>{description}</p>
        </div>
        """,
            unsafe_allow_html=True,
        )


def render_photo_columns(photos: tuple[PhotoRecord, ...], column_count: int, key_prefix: str = "photo") -> str | None:
    """
    Render photos as a waterfall of columns.

    Returns:
        Id of the photo whose button was clicked, if any
    """
    clicked = None
    columns = st.columns(column_count)

    for column, column_photos in zip(columns, distribute(photos, column_count)):
        with column:
            for photo in column_photos:
                st.image(photo.payload_bytes(), use_container_width=True)
                if st.button("🔍", key=f"{key_prefix}_{photo.id}", help=photo.source_name):
                    clicked = photo.id

    return clicked
