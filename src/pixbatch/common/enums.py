"""
Centralized enums for the pixbatch pipeline.

This module contains all enumeration types used throughout the system,
providing a single source of truth for enum definitions.
"""

from enum import Enum


class OutputFormat(str, Enum):
    """Requested output encoding."""

    ORIGINAL = "original"
    JPEG = "jpeg"
    WEBP = "webp"
    AVIF = "avif"


class WatermarkPosition(str, Enum):
    """Watermark anchor positions."""

    CENTER = "center"
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


class TextAlign(str, Enum):
    """Horizontal text alignment relative to the anchor."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class TextBaseline(str, Enum):
    """Vertical text alignment relative to the anchor."""

    ALPHABETIC = "alphabetic"
    BOTTOM = "bottom"
    MIDDLE = "middle"
