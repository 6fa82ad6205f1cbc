"""
Tests for the command-line interface.
"""

import io
import json
import zipfile

import pytest

from pixbatch.cli import build_parser, collect_inputs, main, option_overrides
from pixbatch.config import get_settings
from pixbatch.schemas import InputFile


@pytest.fixture(autouse=True)
def clean_settings_cache(monkeypatch):
    """Run against default settings"""
    monkeypatch.delenv("PIXBATCH_CONFIG_FILE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def source_dir(tmp_path, png_bytes):
    """Directory with two images and a stray text file"""
    directory = tmp_path / "src"
    directory.mkdir()
    (directory / "b.png").write_bytes(png_bytes)
    (directory / "a.png").write_bytes(png_bytes)
    (directory / "readme.txt").write_text("not an image")
    return directory


SIZE_ARGS = ["--width", "100", "--height", "50", "--ratio", "2:1", "--no-focal"]


class TestOptionOverrides:
    """Tests for option_overrides function."""

    def test_only_given_flags(self):
        """Test flags left out do not override defaults."""
        args = build_parser().parse_args(["in.png", "-o", "out", "--quality", "70"])

        assert option_overrides(args) == {"quality": 70.0}

    def test_ratio_and_switches(self):
        """Test ratio parsing and boolean switches."""
        args = build_parser().parse_args(
            ["in.png", "--zip", "a.zip", "--ratio", "16:9", "--fast", "--no-focal", "--skip-resize"]
        )

        overrides = option_overrides(args)

        assert overrides["ratio_x"] == 16
        assert overrides["ratio_y"] == 9
        assert overrides["use_high_quality"] is False
        assert overrides["auto_focal"] is False
        assert overrides["skip_resize"] is True

    def test_output_required(self):
        """Test one output target is required."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["in.png"])


class TestCollectInputs:
    """Tests for collect_inputs function."""

    def test_directory_sorted_known_extensions(self, source_dir):
        """Test directories expand to sorted image files only."""
        files = collect_inputs([str(source_dir)])

        assert [f.name for f in files] == ["a.png", "b.png"]

    def test_missing_path(self, tmp_path):
        """Test missing paths raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            collect_inputs([str(tmp_path / "nope.png")])


class TestMain:
    """Tests for main entry point."""

    def test_write_directory(self, source_dir, tmp_path):
        """Test a directory batch is written to disk."""
        out = tmp_path / "out"

        assert main([str(source_dir), "-o", str(out)] + SIZE_ARGS) == 0

        assert sorted(p.name for p in out.iterdir()) == [
            "a_100x50_001.png",
            "b_100x50_002.png",
        ]

    def test_write_zip(self, source_dir, tmp_path):
        """Test a batch is packed into an archive."""
        archive = tmp_path / "images.zip"

        assert main([str(source_dir), "--zip", str(archive), "--format", "jpeg"] + SIZE_ARGS) == 0

        with zipfile.ZipFile(io.BytesIO(archive.read_bytes())) as zf:
            assert zf.namelist() == ["a_100x50_001.jpg", "b_100x50_002.jpg"]

    def test_manual_crops_file(self, source_dir, tmp_path):
        """Test crops are matched to files by identity key."""
        key = InputFile.from_path(source_dir / "a.png").key
        crops = tmp_path / "crops.json"
        crops.write_text(json.dumps({key: {"x": 0, "y": 0, "width": 30, "height": 20}}))
        out = tmp_path / "out"

        code = main(
            [str(source_dir / "a.png"), "-o", str(out), "--skip-resize", "--crops", str(crops)]
        )

        assert code == 0
        assert [p.name for p in out.iterdir()] == ["a_30x20_001.png"]

    def test_existing_output(self, source_dir, tmp_path):
        """Test existing files fail unless --overwrite is given."""
        out = tmp_path / "out"
        args = [str(source_dir), "-o", str(out)] + SIZE_ARGS

        assert main(args) == 0
        assert main(args) == 2
        assert main(args + ["--overwrite"]) == 0

    def test_no_valid_inputs(self, source_dir, tmp_path):
        """Test a batch of unsupported files exits with status 1."""
        code = main([str(source_dir / "readme.txt"), "-o", str(tmp_path / "out")])

        assert code == 1

    def test_missing_input(self, tmp_path):
        """Test a missing input exits with status 2."""
        assert main([str(tmp_path / "missing.png"), "-o", str(tmp_path / "out")]) == 2

    def test_invalid_dimensions(self, source_dir, tmp_path):
        """Test zero target size exits with status 1."""
        code = main([str(source_dir), "-o", str(tmp_path / "out"), "--width", "0"])

        assert code == 1

    def test_zip_default_name(self, source_dir, tmp_path, monkeypatch):
        """Test --zip without a path uses the configured archive name."""
        monkeypatch.chdir(tmp_path)

        assert main([str(source_dir)] + SIZE_ARGS + ["--zip"]) == 0

        assert (tmp_path / "bulk-images.zip").exists()
