"""
Image processing operations.

Handles resizing of pipeline surfaces using OpenCV:
- High quality: area averaging for downscales, Lanczos otherwise
- Fast: bilinear interpolation
"""

import logging

import cv2
import numpy as np

from pixbatch.exceptions import InvalidDimensionsException, SurfaceAllocationException
from pixbatch.utils import round_half_up

logger = logging.getLogger(__name__)


def select_interpolation(
    source_width: int, source_height: int, width: int, height: int, high_quality: bool
) -> int:
    """
    Pick the OpenCV interpolation flag for a resize.

    Args:
        source_width: Current width
        source_height: Current height
        width: Target width
        height: Target height
        high_quality: Favor fidelity over speed

    Returns:
        OpenCV interpolation constant
    """
    if not high_quality:
        return cv2.INTER_LINEAR

    # INTER_AREA avoids moire when shrinking; it degrades to nearest when enlarging
    if width <= source_width and height <= source_height:
        return cv2.INTER_AREA
    return cv2.INTER_LANCZOS4


def resize_surface(
    image: np.ndarray, width: float, height: float, high_quality: bool = True
) -> np.ndarray:
    """
    Resize a surface to exact dimensions.

    Args:
        image: Input surface
        width: Target width (rounded)
        height: Target height (rounded)
        high_quality: Use area/Lanczos resampling instead of bilinear

    Returns:
        New surface of round(width) x round(height)

    Raises:
        InvalidDimensionsException: If either dimension is not positive
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensionsException(width, height)

    target_width = max(1, round_half_up(width))
    target_height = max(1, round_half_up(height))
    source_height, source_width = image.shape[:2]

    interpolation = select_interpolation(
        source_width, source_height, target_width, target_height, high_quality
    )

    try:
        resized = cv2.resize(image, (target_width, target_height), interpolation=interpolation)
    except (cv2.error, MemoryError) as e:
        logger.error(f"Failed to resize {source_width}x{source_height}: {e}")
        raise SurfaceAllocationException("resize", str(e)) from e

    logger.debug(
        f"Resized {source_width}x{source_height} -> {target_width}x{target_height} "
        f"(interpolation={interpolation})"
    )
    return resized
