"""
Schemas Package

Pydantic models for validation and serialization shared by the core
pipeline, the services and the command-line interface.
"""

# Re-export base types for convenience
from pixbatch.common.base import CropRegion

# Files exchanged with collaborators
from .files import InputFile, ProcessedImage, file_key

# Processing options
from .options import ProcessOptions

__all__ = [
    "CropRegion",
    "InputFile",
    "ProcessedImage",
    "ProcessOptions",
    "file_key",
]
