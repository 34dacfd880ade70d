"""Tests for the batch import task."""

import os
from unittest.mock import patch

from invoke import Context

from eventgallery.cli.batch_import import batch_import, find_image_files, iter_image_files, read_image_file
from eventgallery.services.photo_store import PhotoStore
from eventgallery.services.transcoder import BatchResult, ImageTranscoder
from eventgallery.storage.duckdb_store import DuckDBKeyValueStore
from eventgallery.storage.factory import DUCKDB_FILENAME
from eventgallery.storage.file import FileKeyValueStore
from tests.conftest import create_test_image


def write_images(directory, names):
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_bytes(create_test_image(format_type="PNG" if name.endswith(".png") else "JPEG"))


class TestFindImageFiles:
    """Test cases for image discovery."""

    def test_filters_and_sorts(self, tmp_path):
        """Test that only image extensions are returned, sorted."""
        write_images(tmp_path, ["b.JPG", "a.png"])
        (tmp_path / "notes.txt").write_text("hello")

        files = find_image_files(str(tmp_path))

        assert [os.path.basename(path) for path in files] == ["a.png", "b.JPG"]

    def test_recursive(self, tmp_path):
        """Test searching subdirectories."""
        write_images(tmp_path, ["top.jpg"])
        write_images(tmp_path / "nested", ["inner.jpg"])

        assert len(find_image_files(str(tmp_path))) == 1
        assert len(find_image_files(str(tmp_path), recursive=True)) == 2


class TestBatchImport:
    """Test cases for the batch_import task."""

    def setup_method(self):
        """Set up test fixtures."""
        self.context = Context()

    def test_imports_into_file_backend(self, tmp_path, monkeypatch):
        """Test a full import into the file backend."""
        store_dir = tmp_path / "store"
        monkeypatch.setenv("GALLERY_STORAGE_BACKEND", "file")
        monkeypatch.setenv("GALLERY_STORAGE_PATH", str(store_dir))
        write_images(tmp_path / "photos", ["a.jpg", "b.jpg"])
        (tmp_path / "photos" / "broken.jpg").write_bytes(b"not an image at all")

        result = batch_import(
            self.context, directory=str(tmp_path / "photos"), env_file=str(tmp_path / "missing.env")
        )

        assert result.success_count == 2
        assert result.failure_count == 1
        stored = PhotoStore(FileKeyValueStore(store_dir)).list()
        assert [record.source_name for record in stored] == ["a.jpg", "b.jpg"]

    def test_env_file_selects_duckdb(self, tmp_path, monkeypatch):
        """Test that settings from the env file are applied."""
        for key in ("GALLERY_STORAGE_BACKEND", "GALLERY_STORAGE_PATH"):
            # Restored to unset after the test
            monkeypatch.setenv(key, "")
            monkeypatch.delenv(key)
        store_dir = tmp_path / "db"
        env_file = tmp_path / ".env"
        env_file.write_text(f"GALLERY_STORAGE_BACKEND=duckdb\nGALLERY_STORAGE_PATH={store_dir}\n")
        write_images(tmp_path / "photos", ["a.jpg"])

        result = batch_import(self.context, directory=str(tmp_path / "photos"), env_file=str(env_file))

        assert result.success_count == 1
        with DuckDBKeyValueStore(store_dir / DUCKDB_FILENAME) as backend:
            assert len(PhotoStore(backend)) == 1

    def test_dry_run_does_not_import(self, tmp_path, monkeypatch, capsys):
        """Test that a dry run only lists files."""
        store_dir = tmp_path / "store"
        monkeypatch.setenv("GALLERY_STORAGE_PATH", str(store_dir))
        write_images(tmp_path / "photos", ["a.jpg"])

        result = batch_import(
            self.context,
            directory=str(tmp_path / "photos"),
            env_file=str(tmp_path / "missing.env"),
            dry_run=True,
        )

        assert result is None
        assert "a.jpg" in capsys.readouterr().out
        assert not store_dir.exists()

    def test_missing_directory(self, tmp_path):
        """Test that a missing directory is reported without importing."""
        result = batch_import(
            self.context, directory=str(tmp_path / "nope"), env_file=str(tmp_path / "missing.env")
        )

        assert result is None

    def test_empty_directory(self, tmp_path):
        """Test a directory without images."""
        (tmp_path / "readme.txt").write_text("no photos")

        result = batch_import(self.context, directory=str(tmp_path), env_file=str(tmp_path / "missing.env"))

        assert result is None

    def test_files_reach_ingestion_as_lazy_iterator(self, tmp_path, monkeypatch):
        """Test that the batch is handed over without reading every file up front."""
        monkeypatch.setenv("GALLERY_STORAGE_BACKEND", "memory")
        write_images(tmp_path / "photos", ["a.jpg", "b.jpg"])
        received = {}

        def fake_ingest(files, photo_store):
            received["is_iterator"] = iter(files) is files
            received["names"] = [name for name, _ in files]
            return BatchResult()

        with patch("eventgallery.cli.batch_import.ingest_files", side_effect=fake_ingest):
            batch_import(self.context, directory=str(tmp_path / "photos"), env_file=str(tmp_path / "missing.env"))

        assert received == {"is_iterator": True, "names": ["a.jpg", "b.jpg"]}

    def test_reads_interleave_with_transcodes(self, tmp_path, monkeypatch):
        """Test that each file is read just before it is transcoded."""
        monkeypatch.setenv("GALLERY_STORAGE_BACKEND", "memory")
        write_images(tmp_path / "photos", ["a.jpg", "b.jpg", "c.jpg"])
        events = []
        original_transcode = ImageTranscoder.transcode

        def tracking_read(file_path):
            events.append(("read", os.path.basename(file_path)))
            return read_image_file(file_path)

        def tracking_transcode(transcoder, source_bytes, source_filename, captured_at=None):
            events.append(("transcode", source_filename))
            return original_transcode(transcoder, source_bytes, source_filename, captured_at=captured_at)

        with (
            patch("eventgallery.cli.batch_import.read_image_file", side_effect=tracking_read),
            patch.object(ImageTranscoder, "transcode", autospec=True, side_effect=tracking_transcode),
        ):
            result = batch_import(
                self.context, directory=str(tmp_path / "photos"), env_file=str(tmp_path / "missing.env")
            )

        assert result.success_count == 3
        assert events == [
            ("read", "a.jpg"),
            ("transcode", "a.jpg"),
            ("read", "b.jpg"),
            ("transcode", "b.jpg"),
            ("read", "c.jpg"),
            ("transcode", "c.jpg"),
        ]


class TestIterImageFiles:
    """Test cases for lazy file reading."""

    def test_nothing_read_until_iterated(self, tmp_path):
        """Test that creating the iterator does not touch the files."""
        write_images(tmp_path, ["a.jpg"])
        paths = [str(tmp_path / "a.jpg")]

        with patch("eventgallery.cli.batch_import.read_image_file") as mock_read:
            files = iter_image_files(paths)
            mock_read.assert_not_called()
            mock_read.return_value = b"data"

            assert list(files) == [("a.jpg", b"data")]
