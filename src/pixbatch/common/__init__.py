"""
Common package - shared types and constants.

This package contains the dependency-free building blocks of the pipeline:
- base: CropRegion model
- enums: option enumerations
- constants: defaults and format tables
"""

from pixbatch.common.base import CropRegion
from pixbatch.common.enums import OutputFormat, TextAlign, TextBaseline, WatermarkPosition

__all__ = [
    "CropRegion",
    "OutputFormat",
    "TextAlign",
    "TextBaseline",
    "WatermarkPosition",
]
