"""
Image format conversion utilities.

Handles conversions between the pipeline surface and other representations
using OpenCV:
- Channel normalization to 8-bit BGRA surfaces
- CSS color strings to BGRA tuples
- Mime type resolution and surface encoding with PNG fallback
"""

import logging
import math
import re
from typing import List, Optional, Tuple

import cv2
import numpy as np

from pixbatch.common.constants import FormatConstants, OverlayConstants
from pixbatch.common.enums import OutputFormat
from pixbatch.exceptions import EncodeFailureException

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)
_RGB_COLOR = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*([0-9.]+)\s*)?\)$",
    re.IGNORECASE,
)


def ensure_bgra(image: np.ndarray) -> np.ndarray:
    """
    Ensure image is an 8-bit BGRA surface.

    Args:
        image: Input image (grayscale, BGR or BGRA; 8 or 16 bit)

    Returns:
        New BGRA image with dtype uint8
    """
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        image = cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    if len(image.shape) == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    return image.copy()


def parse_color(color: Optional[str]) -> Tuple[int, int, int, int]:
    """
    Convert a CSS color string to a BGRA tuple.

    Supports #rgb, #rgba, #rrggbb, #rrggbbaa, rgb() and rgba(). Anything
    else falls back to opaque black.

    Args:
        color: CSS color string

    Returns:
        Tuple of (blue, green, red, alpha)
    """
    value = (color or "").strip()

    match = _HEX_COLOR.match(value)
    if match:
        digits = match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(c * 2 for c in digits)
        if len(digits) == 6:
            digits += "ff"
        r, g, b, a = (int(digits[i : i + 2], 16) for i in range(0, 8, 2))
        return (b, g, r, a)

    match = _RGB_COLOR.match(value)
    if match:
        r, g, b = (min(255, int(match.group(i))) for i in (1, 2, 3))
        alpha = match.group(4)
        a = 255 if alpha is None else int(round(min(max(float(alpha), 0.0), 1.0) * 255))
        return (b, g, r, a)

    logger.warning(f"Unrecognized color {color!r}, using black")
    return OverlayConstants.FALLBACK_COLOR_BGRA


def resolve_mime(source_mime: str, output_format: OutputFormat) -> str:
    """
    Pick the output mime type for a source.

    Args:
        source_mime: Declared mime type of the input
        output_format: Requested output format

    Returns:
        Mime type to encode with
    """
    if output_format == OutputFormat.JPEG:
        return FormatConstants.MIME_JPEG
    if output_format == OutputFormat.WEBP:
        return FormatConstants.MIME_WEBP
    if output_format == OutputFormat.AVIF:
        return FormatConstants.MIME_AVIF
    if source_mime in FormatConstants.ACCEPTED_MIME_TYPES:
        return source_mime
    return FormatConstants.MIME_JPEG


def mime_to_extension(mime_type: str) -> str:
    """File extension (without dot) for a mime type."""
    mime = (mime_type or "").lower()
    if "jpeg" in mime or "jpg" in mime:
        return "jpg"
    if "png" in mime:
        return "png"
    if "webp" in mime:
        return "webp"
    if "avif" in mime:
        return "avif"
    return FormatConstants.UNKNOWN_EXTENSION


def normalize_quality(quality: Optional[float]) -> float:
    """
    Normalize a 1-100 quality value to a 0-1 fraction.

    Non-finite or missing values give the default fraction (0.8).
    """
    if quality is None or not math.isfinite(quality):
        return FormatConstants.DEFAULT_QUALITY_FRACTION
    clamped = min(max(quality, FormatConstants.MIN_QUALITY), FormatConstants.MAX_QUALITY)
    return clamped / 100


def _encode_params(ext: str, quality: Optional[float]) -> List[int]:
    """OpenCV encoder parameters for an extension."""
    if quality is None:
        return []

    value = int(round(quality * 100))
    if ext == ".jpg":
        return [cv2.IMWRITE_JPEG_QUALITY, value, cv2.IMWRITE_JPEG_OPTIMIZE, 1]
    if ext == ".webp":
        return [cv2.IMWRITE_WEBP_QUALITY, value]
    if ext == ".avif":
        avif_quality = getattr(cv2, "IMWRITE_AVIF_QUALITY", None)
        return [avif_quality, value] if avif_quality is not None else []
    return []


def _encode(image: np.ndarray, mime_type: str, quality: Optional[float]) -> bytes:
    """
    Encode a BGRA surface with OpenCV.

    Raises:
        EncodeFailureException: If OpenCV has no writer or the writer fails
    """
    ext = FormatConstants.MIME_TO_ENCODER_EXT.get(mime_type)
    if ext is None:
        raise EncodeFailureException(mime_type, "no encoder for mime type")

    if mime_type not in FormatConstants.ALPHA_MIME_TYPES and image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)

    try:
        success, buffer = cv2.imencode(ext, image, _encode_params(ext, quality))
    except cv2.error as e:
        raise EncodeFailureException(mime_type, str(e)) from e

    if not success:
        raise EncodeFailureException(mime_type, "encoder returned no data")

    return buffer.tobytes()


def encode_surface(
    image: np.ndarray, mime_type: str, quality: Optional[float] = None
) -> Tuple[bytes, str]:
    """
    Serialize a surface, falling back to PNG if the requested type fails.

    Args:
        image: BGRA surface
        mime_type: Requested mime type
        quality: Quality on the 1-100 scale

    Returns:
        Tuple of (encoded bytes, mime type actually produced)

    Raises:
        EncodeFailureException: If even the PNG fallback fails
    """
    try:
        return _encode(image, mime_type, normalize_quality(quality)), mime_type
    except EncodeFailureException as e:
        logger.warning(f"Export as {mime_type} failed, falling back to PNG: {e.message}")

    return _encode(image, FormatConstants.MIME_PNG, None), FormatConstants.MIME_PNG
