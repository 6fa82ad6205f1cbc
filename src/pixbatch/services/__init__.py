"""
Services package - high-level operations over the image core.
"""

from pixbatch.services.export_service import build_zip_archive, write_to_directory
from pixbatch.services.pipeline_service import PipelineService, process_images

__all__ = [
    "PipelineService",
    "build_zip_archive",
    "process_images",
    "write_to_directory",
]
