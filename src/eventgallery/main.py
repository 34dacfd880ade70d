"""
Main Streamlit application for eventgallery.

Run with ``streamlit run src/eventgallery/main.py``.
"""

import streamlit as st

from eventgallery.config import get_config, get_storage_backend
from eventgallery.logging_config import configure_structured_logging, get_logger
from eventgallery.ui.pages.admin import render_admin_page
from eventgallery.ui.pages.viewer import render_viewer_page

configure_structured_logging(component="streamlit", storage_backend=get_storage_backend())
logger = get_logger(__name__)

PAGES = {
    "viewer": "📷 ライブギャラリー",
    "admin": "🛠️ 管理ページ",
}


def initialize_session_state() -> None:
    """Initialize session state variables."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = "viewer"

    if "selected_photo_id" not in st.session_state:
        st.session_state.selected_photo_id = None


def render_sidebar() -> None:
    """Render page navigation."""
    with st.sidebar:
        st.markdown("## eventgallery")
        for page, label in PAGES.items():
            button_type = "primary" if st.session_state.current_page == page else "secondary"
            if st.button(label, use_container_width=True, type=button_type):
                st.session_state.current_page = page
                st.rerun()


def main() -> None:
    """Main application entry point."""
    st.set_page_config(
        page_title="eventgallery - Live Photos",
        page_icon="📸",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    initialize_session_state()
    render_sidebar()

    logger.debug("page_render", current_page=st.session_state.current_page)

    if st.session_state.current_page == "admin":
        render_admin_page()
    else:
        render_viewer_page()

    if get_config().get("DEBUG", False, bool):
        with st.expander("Debug Info"):
            st.write("Session State:", st.session_state)


if __name__ == "__main__":
    main()
