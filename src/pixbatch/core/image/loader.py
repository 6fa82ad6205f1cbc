"""
Source image loading.

Decodes input byte buffers with OpenCV into a DecodedSource handle. The
handle owns the decoder output until it is copied into a stable BGRA
surface and must be closed on every exit path; use it as a context manager.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

import cv2
import numpy as np

from pixbatch.common.constants import FormatConstants
from pixbatch.core.image.converters import ensure_bgra
from pixbatch.exceptions import DecodeFailureException, UnsupportedFormatException
from pixbatch.schemas import InputFile

logger = logging.getLogger(__name__)


class DecodedSource:
    """Decoder output for a single input file."""

    def __init__(self, name: str, mime_type: str, pixels: np.ndarray):
        self.name = name
        self.mime_type = mime_type
        self._pixels: Optional[np.ndarray] = pixels

    @property
    def closed(self) -> bool:
        return self._pixels is None

    @property
    def width(self) -> int:
        return self._require_open().shape[1]

    @property
    def height(self) -> int:
        return self._require_open().shape[0]

    def to_surface(self) -> np.ndarray:
        """Copy the decoded pixels into a new BGRA surface."""
        return ensure_bgra(self._require_open())

    def close(self) -> None:
        """Release the decoded buffer. Safe to call more than once."""
        if self._pixels is not None:
            logger.debug(f"Releasing decoded source {self.name}")
            self._pixels = None

    def _require_open(self) -> np.ndarray:
        if self._pixels is None:
            raise ValueError(f"Decoded source {self.name} is closed")
        return self._pixels

    def __enter__(self) -> "DecodedSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def decode_source(data: bytes, mime_type: str, name: str = "<memory>") -> DecodedSource:
    """
    Decode raw image bytes.

    JPEG sources are decoded as color with EXIF orientation applied; other
    formats are decoded unchanged so that their alpha channel survives.

    Args:
        data: Encoded image bytes
        mime_type: Declared mime type
        name: Display name used in messages

    Returns:
        DecodedSource handle (caller must close it)

    Raises:
        UnsupportedFormatException: If mime type is not accepted
        DecodeFailureException: If the bytes cannot be decoded
    """
    if mime_type not in FormatConstants.ACCEPTED_MIME_TYPES:
        raise UnsupportedFormatException(mime_type, name)

    if not data:
        raise DecodeFailureException(name, "empty file")

    flags = cv2.IMREAD_COLOR if mime_type in ("image/jpeg", "image/jpg") else cv2.IMREAD_UNCHANGED

    try:
        pixels = cv2.imdecode(np.frombuffer(data, np.uint8), flags)
    except cv2.error as e:
        raise DecodeFailureException(name, str(e)) from e

    if pixels is None or pixels.size == 0:
        raise DecodeFailureException(name, "unrecognized or corrupt image data")

    return DecodedSource(name, mime_type, pixels)


@contextmanager
def open_source(input_file: InputFile) -> Generator[DecodedSource, None, None]:
    """
    Decode an input file and guarantee the handle is released.

    Usage:
        with open_source(input_file) as source:
            surface = source.to_surface()
    """
    source = decode_source(input_file.data, input_file.mime_type, input_file.name)
    try:
        yield source
    finally:
        source.close()


def load_surface(data: bytes, mime_type: str, name: str = "<memory>") -> np.ndarray:
    """
    Decode image bytes straight into a BGRA surface.

    Args:
        data: Encoded image bytes
        mime_type: Declared mime type
        name: Display name used in messages

    Returns:
        BGRA surface with the image's natural dimensions
    """
    with decode_source(data, mime_type, name) as source:
        return source.to_surface()
