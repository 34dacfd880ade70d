"""
Unit tests for file ingestion.
"""

from unittest.mock import MagicMock, patch

from eventgallery.services.ingest import ingest_files
from eventgallery.services.photo_store import PhotoStore
from eventgallery.services.transcoder import BatchResult, ImageTranscoder
from eventgallery.storage.memory import InMemoryKeyValueStore
from tests.conftest import FakeClock, create_test_image, make_record


class TestIngestFiles:
    """Test cases for ingest_files."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.transcoder = ImageTranscoder(clock=self.clock)
        self.store = PhotoStore(InMemoryKeyValueStore())

    def test_batch_lands_in_selection_order(self):
        """Test that a new batch reads in the order it was selected."""
        files = [(f"{name}.jpg", create_test_image()) for name in ("A", "B", "C")]

        result = ingest_files(files, self.store, self.transcoder)

        assert result.success_count == 3
        assert [record.source_name for record in self.store.list()] == ["A.jpg", "B.jpg", "C.jpg"]

    def test_newer_batch_goes_first(self):
        """Test that a later batch is listed before an earlier one."""
        ingest_files([("old.jpg", create_test_image())], self.store, self.transcoder)
        self.clock.advance(1000)

        new_files = [("new1.jpg", create_test_image()), ("new2.jpg", create_test_image())]
        ingest_files(new_files, self.store, self.transcoder)

        assert [record.source_name for record in self.store.list()] == ["new1.jpg", "new2.jpg", "old.jpg"]

    def test_partial_batch(self):
        """Test that failures are reported and good files are still added."""
        files = [("good.jpg", create_test_image()), ("bad.jpg", b"not an image" * 10)]

        result = ingest_files(files, self.store, self.transcoder)

        assert result.is_partial
        assert [failure.filename for failure in result.failures] == ["bad.jpg"]
        assert [record.source_name for record in self.store.list()] == ["good.jpg"]

    def test_all_failed_does_not_touch_store(self):
        """Test that a fully failed batch adds nothing."""
        store = MagicMock(spec=PhotoStore)

        result = ingest_files([("bad.jpg", b"")], store, self.transcoder)

        assert result.is_complete_failure
        store.add_photos.assert_not_called()

    def test_single_merge_per_batch(self):
        """Test that the batch is added with one call."""
        store = MagicMock(spec=PhotoStore)
        store.__len__.return_value = 2
        files = [("a.jpg", create_test_image()), ("b.jpg", create_test_image())]

        result = ingest_files(files, store, self.transcoder)

        store.add_photos.assert_called_once_with(result.records)

    def test_uses_global_transcoder_by_default(self):
        """Test the default transcoder."""
        fake_transcoder = MagicMock()
        fake_transcoder.transcode_batch.return_value = BatchResult(records=[make_record("a", 1)])

        with patch("eventgallery.services.ingest.get_transcoder", return_value=fake_transcoder):
            result = ingest_files([("a.jpg", b"...")], self.store)

        assert result.success_count == 1
        assert self.store.get("a") is not None
