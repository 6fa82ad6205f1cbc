"""
pixbatch - batch image transformation pipeline.

Crops (manually or by aspect ratio), resizes, frames, watermarks, encodes and
renames a batch of in-memory images.
"""

from pixbatch.common.base import CropRegion
from pixbatch.exceptions import (
    DecodeFailureException,
    EncodeFailureException,
    InvalidDimensionsException,
    NoValidInputsException,
    PixbatchException,
    SurfaceAllocationException,
    UnsupportedFormatException,
)
from pixbatch.schemas import InputFile, ProcessedImage, ProcessOptions, file_key
from pixbatch.services import PipelineService, process_images

__version__ = "1.0.0"

__all__ = [
    "CropRegion",
    "DecodeFailureException",
    "EncodeFailureException",
    "InputFile",
    "InvalidDimensionsException",
    "NoValidInputsException",
    "PipelineService",
    "PixbatchException",
    "ProcessOptions",
    "ProcessedImage",
    "SurfaceAllocationException",
    "UnsupportedFormatException",
    "file_key",
    "process_images",
]
