"""
Decorative compositing for output images.

Provides the two compositing steps applied after resizing, in order:
- apply_border: solid frame around the image
- apply_watermark: semi-transparent white text at an anchor position
"""

from typing import Tuple

import cv2
import numpy as np

from pixbatch.common.constants import OverlayConstants
from pixbatch.common.enums import TextAlign, TextBaseline, WatermarkPosition
from pixbatch.core.image.converters import parse_color
from pixbatch.exceptions import SurfaceAllocationException
from pixbatch.utils import round_half_up

# Default rendering parameters
DEFAULT_FONT = cv2.FONT_HERSHEY_SIMPLEX
DEFAULT_LINE_TYPE = cv2.LINE_AA


def apply_border(image: np.ndarray, color: str, thickness: int) -> np.ndarray:
    """
    Surround the image with a solid border.

    Args:
        image: Input surface
        color: CSS color string
        thickness: Border width in pixels (<= 0 returns the input unchanged)

    Returns:
        Surface of (width + 2*thickness) x (height + 2*thickness)
    """
    if thickness <= 0:
        return image

    t = round_half_up(thickness)
    try:
        return cv2.copyMakeBorder(
            image, t, t, t, t, cv2.BORDER_CONSTANT, value=parse_color(color)
        )
    except (cv2.error, MemoryError) as e:
        raise SurfaceAllocationException("border", str(e)) from e


def watermark_anchor(
    width: int, height: int, size: float, position: WatermarkPosition
) -> Tuple[float, float, TextAlign, TextBaseline]:
    """
    Anchor point and alignment for a watermark.

    Args:
        width: Surface width
        height: Surface height
        size: Font height in pixels
        position: Requested position

    Returns:
        Tuple of (x, y, horizontal alignment, vertical alignment)
    """
    padding = max(OverlayConstants.WATERMARK_MIN_PADDING, size / 2)

    if position == WatermarkPosition.TOP_LEFT:
        return padding, size + padding / 2, TextAlign.LEFT, TextBaseline.ALPHABETIC
    if position == WatermarkPosition.TOP_RIGHT:
        return width - padding, size + padding / 2, TextAlign.RIGHT, TextBaseline.ALPHABETIC
    if position == WatermarkPosition.BOTTOM_LEFT:
        return padding, height - padding, TextAlign.LEFT, TextBaseline.BOTTOM
    if position == WatermarkPosition.CENTER:
        return width / 2, height / 2 + size / 2, TextAlign.CENTER, TextBaseline.MIDDLE
    return width - padding, height - padding, TextAlign.RIGHT, TextBaseline.BOTTOM


def text_origin(
    anchor_x: float,
    anchor_y: float,
    text_width: int,
    text_height: int,
    baseline: int,
    align: TextAlign,
    vertical: TextBaseline,
) -> Tuple[int, int]:
    """
    Convert an aligned anchor into the bottom-left origin cv2.putText expects.

    Args:
        anchor_x: Anchor x coordinate
        anchor_y: Anchor y coordinate
        text_width: Rendered text width
        text_height: Rendered text height above the baseline
        baseline: Descent below the baseline
        align: Horizontal alignment
        vertical: Vertical alignment

    Returns:
        Tuple of (x, y) text origin
    """
    if align == TextAlign.RIGHT:
        x = anchor_x - text_width
    elif align == TextAlign.CENTER:
        x = anchor_x - text_width / 2
    else:
        x = anchor_x

    if vertical == TextBaseline.BOTTOM:
        y = anchor_y - baseline
    elif vertical == TextBaseline.MIDDLE:
        y = anchor_y + (text_height - baseline) / 2
    else:
        y = anchor_y

    return round_half_up(x), round_half_up(y)


def apply_watermark(
    image: np.ndarray,
    text: str,
    size: float,
    opacity: float,
    position: WatermarkPosition = WatermarkPosition.BOTTOM_RIGHT,
) -> np.ndarray:
    """
    Draw semi-transparent white text onto the image.

    Args:
        image: Input surface (BGRA)
        text: Watermark text (blank returns the input unchanged)
        size: Font height in pixels (<= 0 returns the input unchanged)
        opacity: Text alpha 0-1 (<= 0 returns the input unchanged)
        position: Anchor position

    Returns:
        New surface with the watermark blended in
    """
    # NaN size or opacity disables the watermark
    if not text or not text.strip() or not size > 0 or not opacity > 0:
        return image

    alpha = min(opacity, 1.0)
    height, width = image.shape[:2]

    pixel_height = max(1, round_half_up(size))
    thickness = max(1, round_half_up(size / OverlayConstants.WATERMARK_STROKE_DIVISOR))
    font_scale = cv2.getFontScaleFromHeight(DEFAULT_FONT, pixel_height, thickness)
    (text_width, text_height), baseline = cv2.getTextSize(text, DEFAULT_FONT, font_scale, thickness)

    anchor_x, anchor_y, align, vertical = watermark_anchor(width, height, size, position)
    origin = text_origin(anchor_x, anchor_y, text_width, text_height, baseline, align, vertical)

    color = OverlayConstants.WATERMARK_COLOR_BGRA[: image.shape[2]]
    try:
        layer = image.copy()
        cv2.putText(layer, text, origin, DEFAULT_FONT, font_scale, color, thickness, DEFAULT_LINE_TYPE)
        # Only text pixels differ between layer and image, so only they blend
        return cv2.addWeighted(layer, alpha, image, 1.0 - alpha, 0)
    except (cv2.error, MemoryError) as e:
        raise SurfaceAllocationException("watermark", str(e)) from e
