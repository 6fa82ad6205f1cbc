"""
Pytest configuration and fixtures for pixbatch tests
"""

import cv2
import numpy as np
import pytest

from pixbatch.schemas import InputFile, ProcessOptions


def _encode(image: np.ndarray, ext: str = ".png") -> bytes:
    """Encode a test image with OpenCV."""
    success, buffer = cv2.imencode(ext, image)
    assert success
    return buffer.tobytes()


@pytest.fixture
def test_image():
    """Create a 640x480 BGRA test image"""
    image = np.zeros((480, 640, 4), dtype=np.uint8)
    image[:, :, 3] = 255
    # Add some content
    cv2.rectangle(image, (100, 100), (300, 300), (255, 255, 255, 255), -1)
    cv2.circle(image, (450, 350), 50, (128, 128, 128, 255), -1)
    return image


@pytest.fixture
def png_bytes(test_image):
    """The test image encoded as PNG"""
    return _encode(test_image, ".png")


@pytest.fixture
def jpeg_bytes(test_image):
    """The test image encoded as JPEG"""
    return _encode(cv2.cvtColor(test_image, cv2.COLOR_BGRA2BGR), ".jpg")


@pytest.fixture
def make_input_file(png_bytes):
    """Factory for InputFile instances"""

    def _make(name="photo.png", mime_type="image/png", data=None, last_modified=1700000000000):
        return InputFile(
            data=png_bytes if data is None else data,
            mime_type=mime_type,
            name=name,
            last_modified=last_modified,
        )

    return _make


@pytest.fixture
def center_options():
    """Options with deterministic center cropping and fast resizing"""
    return ProcessOptions(
        target_width=200,
        target_height=100,
        ratio_x=2,
        ratio_y=1,
        auto_focal=False,
        output_format="original",
    )


@pytest.fixture
def encode_image():
    """Encoder for ad-hoc test images"""
    return _encode
