"""Viewer page: live waterfall of event photos."""

import streamlit as st
import structlog

from eventgallery.config import get_viewer_refresh_seconds
from eventgallery.services.gallery import column_count_for_width
from eventgallery.ui.components import format_captured_at, render_empty_state, render_header, render_photo_columns
from eventgallery.ui.state import get_photo_store, get_settings_store

logger = structlog.get_logger(__name__)

VIEWPORT_WIDTHS = [640, 768, 1024, 1280]

LIVE_REFRESH_SECONDS = get_viewer_refresh_seconds()


def render_selected_photo() -> None:
    """Show the selected photo enlarged above the grid."""
    photo_id = st.session_state.get("selected_photo_id")
    if not photo_id:
        return

    photo = get_photo_store().get(photo_id)
    if photo is None:
        st.session_state.selected_photo_id = None
        return

    st.image(photo.payload_bytes(), caption=photo.source_name, use_container_width=True)
    st.caption(f"{photo.width} × {photo.height} · {format_captured_at(photo.captured_at)}")
    if st.button("✖ 閉じる", key="close_selected_photo"):
        st.session_state.selected_photo_id = None
        st.rerun()
    st.divider()


@st.fragment(run_every=LIVE_REFRESH_SECONDS)
def render_live_gallery(column_count: int) -> None:
    """Render the header, photo count and grid, re-run on a timer to pick up changes."""
    render_header(get_settings_store().get())

    photo_store = get_photo_store()
    photos = photo_store.list()

    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        st.markdown("### 🔴 LIVE 現場の写真")
    with col2:
        st.metric("写真", len(photos))
    with col3:
        st.metric("最終更新", format_captured_at(photo_store.latest_captured_at()))

    st.divider()

    if not photos:
        render_empty_state("まだ写真がありません", "撮影された写真はここに自動で表示されます。", icon="📷")
        return

    render_selected_photo()

    clicked = render_photo_columns(photos, column_count, key_prefix="viewer")
    if clicked:
        logger.debug("photo_selected", photo_id=clicked)
        st.session_state.selected_photo_id = clicked
        st.rerun()


def render_viewer_page() -> None:
    """Render the viewer page."""
    # Sidebar widgets cannot live inside a fragment
    viewport_width = st.sidebar.select_slider("表示幅 (px)", options=VIEWPORT_WIDTHS, value=1280)
    render_live_gallery(column_count_for_width(viewport_width))
