"""Tests for the viewer page with Streamlit mocked."""

from unittest.mock import MagicMock, call, patch

import pytest

from eventgallery.models.settings import GallerySettings
from eventgallery.services.photo_store import PhotoStore
from eventgallery.storage.memory import InMemoryKeyValueStore
from eventgallery.ui.pages import viewer
from tests.conftest import make_record

# Body of the timed fragment, without Streamlit's fragment runtime
live_gallery_body = viewer.render_live_gallery.__wrapped__


@pytest.fixture
def mock_st():
    with patch("eventgallery.ui.pages.viewer.st") as st:
        st.button.return_value = False
        st.session_state = {}
        st.columns.side_effect = lambda spec: [MagicMock() for _ in (range(spec) if isinstance(spec, int) else spec)]
        yield st


class TestViewerPage:
    """Test cases for the live viewer."""

    def setup_method(self):
        """Set up test fixtures."""
        self.photo_store = PhotoStore(InMemoryKeyValueStore())
        self.settings_store = MagicMock()
        self.settings_store.get.return_value = GallerySettings(title="Summit", banner_payload="")

    def render_body(self, column_count=3):
        with (
            patch("eventgallery.ui.pages.viewer.get_photo_store", return_value=self.photo_store),
            patch("eventgallery.ui.pages.viewer.get_settings_store", return_value=self.settings_store),
            patch("eventgallery.ui.pages.viewer.render_header"),
            patch("eventgallery.ui.pages.viewer.render_empty_state") as mock_empty,
            patch("eventgallery.ui.pages.viewer.render_photo_columns", return_value=None) as mock_columns,
        ):
            live_gallery_body(column_count)
        return mock_empty, mock_columns

    def test_refresh_picks_up_new_photos(self, mock_st):
        """Test that a later run of the gallery shows photos added in between."""
        mock_empty, mock_columns = self.render_body()
        mock_empty.assert_called_once()
        mock_columns.assert_not_called()

        self.photo_store.add_photos([make_record("a", 100), make_record("b", 200)])
        mock_empty, mock_columns = self.render_body()

        mock_empty.assert_not_called()
        mock_columns.assert_called_once_with(self.photo_store.list(), 3, key_prefix="viewer")
        assert call("写真", 2) in mock_st.metric.call_args_list

    def test_page_resolves_column_count_from_width(self, mock_st):
        """Test that the sidebar width picks the column count for the gallery."""
        mock_st.sidebar.select_slider.return_value = 1024

        with patch("eventgallery.ui.pages.viewer.render_live_gallery") as mock_gallery:
            viewer.render_viewer_page()

        mock_gallery.assert_called_once_with(4)
