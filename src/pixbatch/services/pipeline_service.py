"""
Pipeline Service - batch orchestration of the image stages.

Runs every accepted input file through, in order:
load -> manual crop -> ratio crop + resize -> border -> watermark -> encode -> name
and collects the results. The first failure aborts the batch.
"""

import logging
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from pixbatch.common.base import CropRegion
from pixbatch.core.image import (
    FocalStrategy,
    apply_border,
    apply_manual_crop,
    apply_ratio_crop,
    apply_watermark,
    build_output_name,
    encode_surface,
    get_focal_strategy,
    open_source,
    resize_surface,
    resolve_mime,
)
from pixbatch.exceptions import InvalidDimensionsException, NoValidInputsException
from pixbatch.schemas import InputFile, ProcessedImage, ProcessOptions
from pixbatch.utils import timer

logger = logging.getLogger(__name__)


class PipelineService:
    """
    Service for batch image transformation.

    Holds no per-batch state; a single instance can process any number of
    batches.
    """

    def __init__(self, focal_strategy: Optional[FocalStrategy] = None):
        """
        Initialize pipeline service.

        Args:
            focal_strategy: Strategy used when auto_focal is enabled
                (saliency-based when omitted)
        """
        self.focal_strategy = focal_strategy

    def filter_inputs(self, files: List[InputFile]) -> List[InputFile]:
        """
        Drop files whose mime type is not accepted.

        Raises:
            NoValidInputsException: If nothing remains
        """
        valid = [f for f in files if f.is_supported]

        for rejected in (f for f in files if not f.is_supported):
            logger.warning(f"Skipping {rejected.name}: unsupported type {rejected.mime_type!r}")

        if not valid:
            raise NoValidInputsException(rejected=len(files))
        return valid

    def resolve_target_size(self, options: ProcessOptions) -> Tuple[int, int]:
        """
        Derive target dimensions and validate them for the whole batch.

        Raises:
            InvalidDimensionsException: If resizing is enabled and a
                dimension is not positive
        """
        width, height = options.derive_target_size()
        if not options.skip_resize and (width <= 0 or height <= 0):
            raise InvalidDimensionsException(width, height)
        return width, height

    def _strategy_for(self, options: ProcessOptions) -> FocalStrategy:
        if options.auto_focal and self.focal_strategy is not None:
            return self.focal_strategy
        return get_focal_strategy(options.auto_focal)

    def transform(
        self,
        surface: np.ndarray,
        options: ProcessOptions,
        target_size: Tuple[int, int],
        manual_crop: Optional[CropRegion] = None,
    ) -> np.ndarray:
        """
        Apply crop, resize and compositing to one surface.

        Args:
            surface: Decoded BGRA surface
            options: Processing options
            target_size: Derived (width, height)
            manual_crop: Optional manual region for this file

        Returns:
            Final surface ready to encode
        """
        if manual_crop is not None:
            surface = apply_manual_crop(surface, manual_crop)

        if not options.skip_resize:
            surface = apply_ratio_crop(surface, options.ratio, self._strategy_for(options))
            surface = resize_surface(surface, *target_size, high_quality=options.use_high_quality)

        surface = apply_border(surface, options.border_color, options.border_thickness)
        return apply_watermark(
            surface,
            options.watermark_text,
            options.watermark_size,
            options.watermark_opacity,
            options.watermark_position,
        )

    def process_file(
        self,
        input_file: InputFile,
        options: ProcessOptions,
        target_size: Tuple[int, int],
        index: int,
        manual_crop: Optional[CropRegion] = None,
    ) -> ProcessedImage:
        """
        Run one file through the pipeline.

        The decoded source is released when this returns or raises.

        Args:
            input_file: File to process
            options: Processing options
            target_size: Derived (width, height)
            index: Zero-based position in the batch
            manual_crop: Optional manual region for this file

        Returns:
            ProcessedImage
        """
        target_mime = resolve_mime(input_file.mime_type, options.output_format)

        with open_source(input_file) as source:
            final = self.transform(source.to_surface(), options, target_size, manual_crop)

        data, mime_type = encode_surface(final, target_mime, options.quality)
        height, width = final.shape[:2]

        name = build_output_name(
            input_file.name,
            width,
            height,
            mime_type,
            options.rename_pattern,
            index,
            options.start_number,
        )

        return ProcessedImage(
            name=name, data=data, width=width, height=height, mime_type=mime_type
        )

    def process(
        self,
        files: List[InputFile],
        options: ProcessOptions,
        manual_crops: Optional[Mapping[str, CropRegion]] = None,
    ) -> List[ProcessedImage]:
        """
        Process a batch of files.

        Args:
            files: Input files; unsupported types are skipped
            options: Processing options
            manual_crops: Optional map of file-identity key to crop region

        Returns:
            ProcessedImage list in input order

        Raises:
            NoValidInputsException: If no file has an accepted type
            InvalidDimensionsException: If target dimensions are invalid
            PixbatchException: The first per-file failure
        """
        valid_files = self.filter_inputs(files)
        target_size = self.resolve_target_size(options)
        manual_crops = manual_crops or {}

        results: List[ProcessedImage] = []

        for index, input_file in enumerate(valid_files):
            with timer() as t:
                try:
                    result = self.process_file(
                        input_file,
                        options,
                        target_size,
                        index,
                        manual_crops.get(input_file.key),
                    )
                except Exception as e:
                    logger.error(f"Failed to process {input_file.name}: {e}")
                    raise

            logger.info(
                f"Processed {input_file.name} -> {result.name} "
                f"({result.width}x{result.height}, {result.size_bytes} bytes, {t['ms']}ms)"
            )
            results.append(result)

        return results


def process_images(
    files: List[InputFile],
    options: Optional[ProcessOptions] = None,
    manual_crops: Optional[Dict[str, CropRegion]] = None,
) -> List[ProcessedImage]:
    """
    Process a batch of images with a default PipelineService.

    Args:
        files: Input files
        options: Processing options (defaults when omitted)
        manual_crops: Optional map of file-identity key to crop region

    Returns:
        ProcessedImage list in input order
    """
    return PipelineService().process(files, options or ProcessOptions(), manual_crops)
