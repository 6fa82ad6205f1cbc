"""
Tests for core.image.loader module.
"""

import cv2
import numpy as np
import pytest

from pixbatch.core.image.loader import decode_source, load_surface, open_source
from pixbatch.exceptions import DecodeFailureException, UnsupportedFormatException


class TestDecodeSource:
    """Tests for decode_source and load_surface."""

    def test_decode_png_natural_size(self, png_bytes):
        """Test decoded surface has the image's natural dimensions."""
        surface = load_surface(png_bytes, "image/png")

        assert surface.shape == (480, 640, 4)
        assert surface.dtype == np.uint8

    def test_decode_jpeg_gains_alpha(self, jpeg_bytes):
        """Test JPEG sources become opaque BGRA surfaces."""
        surface = load_surface(jpeg_bytes, "image/jpeg")

        assert surface.shape == (480, 640, 4)
        assert (surface[:, :, 3] == 255).all()

    def test_decode_keeps_png_alpha(self, encode_image):
        """Test transparent PNG pixels stay transparent."""
        image = np.zeros((10, 10, 4), dtype=np.uint8)
        image[:, 5:, 3] = 255

        surface = load_surface(encode_image(image, ".png"), "image/png")

        assert surface[0, 0, 3] == 0
        assert surface[0, 9, 3] == 255

    def test_decode_grayscale_png(self, encode_image):
        """Test grayscale sources are expanded to BGRA."""
        image = np.full((12, 8), 200, dtype=np.uint8)

        surface = load_surface(encode_image(image, ".png"), "image/png")

        assert surface.shape == (12, 8, 4)
        assert tuple(surface[0, 0]) == (200, 200, 200, 255)

    def test_unsupported_mime(self, png_bytes):
        """Test mime types outside the accepted set are rejected."""
        with pytest.raises(UnsupportedFormatException):
            decode_source(png_bytes, "image/gif", "anim.gif")

    def test_corrupt_data(self):
        """Test undecodable bytes raise DecodeFailureException."""
        with pytest.raises(DecodeFailureException) as exc_info:
            decode_source(b"definitely not an image", "image/png", "broken.png")

        assert "broken.png" in exc_info.value.message

    def test_empty_data(self):
        """Test empty buffers raise DecodeFailureException."""
        with pytest.raises(DecodeFailureException):
            decode_source(b"", "image/png", "empty.png")


class TestDecodedSourceLifecycle:
    """Tests for the scoped release of decoded sources."""

    def test_context_manager_closes(self, png_bytes):
        """Test leaving the with-block releases the handle."""
        with decode_source(png_bytes, "image/png", "a.png") as source:
            assert not source.closed
            assert (source.width, source.height) == (640, 480)

        assert source.closed

    def test_closed_source_refuses_access(self, png_bytes):
        """Test a closed handle cannot produce a surface."""
        source = decode_source(png_bytes, "image/png", "a.png")
        source.close()
        source.close()

        with pytest.raises(ValueError):
            source.to_surface()

    def test_surface_outlives_source(self, png_bytes):
        """Test the copied surface stays valid after release."""
        with decode_source(png_bytes, "image/png", "a.png") as source:
            surface = source.to_surface()

        assert surface.shape == (480, 640, 4)

    def test_open_source_releases_on_error(self, make_input_file):
        """Test the handle is released when the block raises."""
        captured = {}

        with pytest.raises(RuntimeError):
            with open_source(make_input_file()) as source:
                captured["source"] = source
                raise RuntimeError("stage failed")

        assert captured["source"].closed

    def test_jpeg_exif_orientation_applied(self, jpeg_bytes):
        """Test JPEG decoding matches OpenCV's orientation-aware color decode."""
        expected = cv2.imdecode(np.frombuffer(jpeg_bytes, np.uint8), cv2.IMREAD_COLOR)

        surface = load_surface(jpeg_bytes, "image/jpeg")

        assert surface.shape[:2] == expected.shape[:2]
