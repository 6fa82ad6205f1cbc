"""
Tests for services.export_service module.
"""

import io
import warnings
import zipfile

import pytest

from pixbatch.schemas import ProcessedImage
from pixbatch.services import build_zip_archive, write_to_directory


@pytest.fixture
def processed_images():
    """Two small processed images"""
    return [
        ProcessedImage(name="a_001.png", data=b"first", width=10, height=10, mime_type="image/png"),
        ProcessedImage(name="b_002.jpg", data=b"second", width=5, height=8, mime_type="image/jpeg"),
    ]


class TestBuildZipArchive:
    """Tests for build_zip_archive function."""

    def test_archive_contents(self, processed_images):
        """Test every image is stored under its name."""
        data = build_zip_archive(processed_images)

        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert zf.namelist() == ["a_001.png", "b_002.jpg"]
            assert zf.read("b_002.jpg") == b"second"

    def test_empty_archive(self):
        """Test an empty batch gives a valid empty archive."""
        with zipfile.ZipFile(io.BytesIO(build_zip_archive([]))) as zf:
            assert zf.namelist() == []

    def test_repeated_name_keeps_last(self):
        """Test a repeated name yields one entry holding the last image."""
        images = [
            ProcessedImage(name="out.png", data=b"A", width=1, height=1, mime_type="image/png"),
            ProcessedImage(name="other.png", data=b"C", width=1, height=1, mime_type="image/png"),
            ProcessedImage(name="out.png", data=b"B", width=1, height=1, mime_type="image/png"),
        ]

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            data = build_zip_archive(images)

        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert zf.namelist() == ["out.png", "other.png"]
            assert zf.read("out.png") == b"B"


class TestWriteToDirectory:
    """Tests for write_to_directory function."""

    def test_writes_files(self, processed_images, tmp_path):
        """Test files are written and the directory is created."""
        target = tmp_path / "out" / "nested"

        paths = write_to_directory(processed_images, target)

        assert [p.name for p in paths] == ["a_001.png", "b_002.jpg"]
        assert (target / "a_001.png").read_bytes() == b"first"

    def test_refuses_to_overwrite(self, processed_images, tmp_path):
        """Test existing files are protected and nothing is written."""
        (tmp_path / "b_002.jpg").write_bytes(b"keep")

        with pytest.raises(FileExistsError):
            write_to_directory(processed_images, tmp_path)

        assert not (tmp_path / "a_001.png").exists()
        assert (tmp_path / "b_002.jpg").read_bytes() == b"keep"

    def test_overwrite(self, processed_images, tmp_path):
        """Test overwrite replaces existing files."""
        (tmp_path / "b_002.jpg").write_bytes(b"old")

        write_to_directory(processed_images, tmp_path, overwrite=True)

        assert (tmp_path / "b_002.jpg").read_bytes() == b"second"

    def test_repeated_name_refused(self, tmp_path):
        """Test two images with the same name are refused before writing."""
        images = [
            ProcessedImage(name="out.png", data=b"A", width=1, height=1, mime_type="image/png"),
            ProcessedImage(name="out.png", data=b"B", width=1, height=1, mime_type="image/png"),
        ]

        with pytest.raises(FileExistsError):
            write_to_directory(images, tmp_path)

        assert not (tmp_path / "out.png").exists()

    def test_repeated_name_with_overwrite(self, tmp_path):
        """Test overwrite lets the last image with a repeated name win."""
        images = [
            ProcessedImage(name="out.png", data=b"A", width=1, height=1, mime_type="image/png"),
            ProcessedImage(name="out.png", data=b"B", width=1, height=1, mime_type="image/png"),
        ]

        write_to_directory(images, tmp_path, overwrite=True)

        assert [p.name for p in tmp_path.iterdir()] == ["out.png"]
        assert (tmp_path / "out.png").read_bytes() == b"B"
