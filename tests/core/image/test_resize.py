"""
Tests for core.image.processors module.
"""

import cv2
import numpy as np
import pytest

from pixbatch.core.image.processors import resize_surface, select_interpolation
from pixbatch.exceptions import InvalidDimensionsException, SurfaceAllocationException


class TestSelectInterpolation:
    """Tests for select_interpolation function."""

    def test_fast_mode_is_bilinear(self):
        """Test fast mode always uses bilinear interpolation."""
        assert select_interpolation(100, 100, 50, 50, False) == cv2.INTER_LINEAR
        assert select_interpolation(100, 100, 500, 500, False) == cv2.INTER_LINEAR

    def test_high_quality_downscale(self):
        """Test high quality shrinking uses area averaging."""
        assert select_interpolation(100, 100, 50, 50, True) == cv2.INTER_AREA

    def test_high_quality_upscale(self):
        """Test high quality enlarging uses Lanczos."""
        assert select_interpolation(100, 100, 200, 50, True) == cv2.INTER_LANCZOS4


class TestResizeSurface:
    """Tests for resize_surface function."""

    @pytest.mark.parametrize("high_quality", [True, False])
    def test_exact_dimensions(self, test_image, high_quality):
        """Test output has exactly the requested size."""
        result = resize_surface(test_image, 200, 100, high_quality)

        assert result.shape == (100, 200, 4)

    def test_fractional_dimensions_round(self, test_image):
        """Test fractional targets are rounded half up."""
        result = resize_surface(test_image, 1066.5, 599.4)

        assert result.shape[:2] == (599, 1067)

    def test_upscale(self, test_image):
        """Test enlarging works."""
        result = resize_surface(test_image, 1280, 960)

        assert result.shape[:2] == (960, 1280)

    def test_preserves_alpha(self):
        """Test transparent areas stay transparent."""
        image = np.zeros((100, 100, 4), dtype=np.uint8)
        image[:, 50:, 3] = 255

        result = resize_surface(image, 50, 50)

        assert result[10, 5, 3] == 0
        assert result[10, 45, 3] == 255

    @pytest.mark.parametrize("width,height", [(0, 100), (100, 0), (-5, 10)])
    def test_invalid_dimensions(self, test_image, width, height):
        """Test non-positive targets are rejected."""
        with pytest.raises(InvalidDimensionsException):
            resize_surface(test_image, width, height)

    def test_allocation_failure(self, test_image, monkeypatch):
        """Test OpenCV errors surface as SurfaceAllocationException."""

        def failing_resize(*args, **kwargs):
            raise cv2.error("insufficient memory")

        monkeypatch.setattr(cv2, "resize", failing_resize)

        with pytest.raises(SurfaceAllocationException):
            resize_surface(test_image, 100, 100)
