"""
Crop engine.

Two crop phases run before resizing:
- manual crop: copy a caller-supplied region, scaled to its rounded size
- ratio crop: cut the largest window with the requested aspect ratio,
  placed by a FocalStrategy (centered, or on the most salient area)
"""

import logging
from abc import ABC, abstractmethod
from typing import Tuple

import cv2
import numpy as np

from pixbatch.common.base import CropRegion
from pixbatch.common.constants import SaliencyConstants
from pixbatch.exceptions import SurfaceAllocationException
from pixbatch.utils import round_half_up

logger = logging.getLogger(__name__)


class FocalStrategy(ABC):
    """
    Chooses where a crop window of a fixed size sits inside an image.

    Implementations only pick the position; the crop engine clamps whatever
    region they return into the image bounds.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def select_region(self, image: np.ndarray, width: int, height: int) -> CropRegion:
        """
        Select a crop window.

        Args:
            image: Source surface
            width: Window width in pixels
            height: Window height in pixels

        Returns:
            Region of the requested size within the image
        """
        pass


class CenterFocalStrategy(FocalStrategy):
    """Centers the crop window."""

    def select_region(self, image: np.ndarray, width: int, height: int) -> CropRegion:
        img_height, img_width = image.shape[:2]
        x = max(0, (img_width - width) // 2)
        y = max(0, (img_height - height) // 2)
        return CropRegion(x=x, y=y, width=width, height=height)


class SaliencyFocalStrategy(FocalStrategy):
    """
    Places the crop window over the most salient part of the image.

    Uses OpenCV's spectral residual static saliency map and scores every
    window position by the saliency it contains (summed through an integral
    image). Equal scores resolve to the window nearest the center.
    """

    def __init__(self, tolerance: float = SaliencyConstants.SCORE_TOLERANCE):
        super().__init__()
        self.tolerance = tolerance

    def saliency_map(self, image: np.ndarray) -> np.ndarray:
        """
        Compute a float32 saliency map the size of the image.

        Args:
            image: BGR or BGRA surface

        Returns:
            2D saliency map with values in [0, 1]
        """
        bgr = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR) if image.shape[2] == 4 else image
        saliency = cv2.saliency.StaticSaliencySpectralResidual_create()
        success, saliency_map = saliency.computeSaliency(bgr)
        if not success:
            self.logger.warning("Saliency computation failed; using a flat map")
            return np.zeros(image.shape[:2], dtype=np.float32)

        img_height, img_width = image.shape[:2]
        if saliency_map.shape[:2] != (img_height, img_width):
            saliency_map = cv2.resize(saliency_map, (img_width, img_height))
        # Flat images give log(0) in the spectrum
        return np.nan_to_num(saliency_map.astype(np.float32), nan=0.0, posinf=0.0, neginf=0.0)

    def select_region(self, image: np.ndarray, width: int, height: int) -> CropRegion:
        img_height, img_width = image.shape[:2]
        width = min(width, img_width)
        height = min(height, img_height)

        integral = cv2.integral(self.saliency_map(image))
        rows = img_height - height + 1
        cols = img_width - width + 1

        scores = (
            integral[height:, width:]
            - integral[:rows, width:]
            - integral[height:, :cols]
            + integral[:rows, :cols]
        )

        best = scores.max()
        candidates = np.argwhere(scores >= best - self.tolerance * max(abs(best), 1.0))

        center = np.array([(img_height - height) / 2, (img_width - width) / 2])
        distances = ((candidates - center) ** 2).sum(axis=1)
        y, x = candidates[int(np.argmin(distances))]

        self.logger.debug(f"Saliency crop {width}x{height} at ({x}, {y}), score {best:.2f}")
        return CropRegion(x=int(x), y=int(y), width=width, height=height)


def get_focal_strategy(auto_focal: bool) -> FocalStrategy:
    """Strategy for the auto_focal option."""
    return SaliencyFocalStrategy() if auto_focal else CenterFocalStrategy()


def compute_ratio_crop_size(width: int, height: int, ratio: float) -> Tuple[int, int]:
    """
    Largest window with the given aspect ratio that fits the image.

    Args:
        width: Image width
        height: Image height
        ratio: Desired width / height

    Returns:
        Tuple of (crop_width, crop_height)
    """
    source_ratio = width / height

    if source_ratio > ratio:
        crop_height = height
        crop_width = round_half_up(crop_height * ratio)
    else:
        crop_width = width
        crop_height = round_half_up(crop_width / ratio)

    return min(max(crop_width, 1), width), min(max(crop_height, 1), height)


def crop_to_region(image: np.ndarray, region: CropRegion) -> np.ndarray:
    """
    Copy a region of the image, clamped into its bounds.

    Args:
        image: Source surface
        region: Region to copy

    Returns:
        New surface holding the region's pixels
    """
    img_height, img_width = image.shape[:2]
    x1, y1, x2, y2 = region.pixel_bounds(img_width, img_height)
    return image[y1:y2, x1:x2].copy()


def apply_manual_crop(image: np.ndarray, region: CropRegion) -> np.ndarray:
    """
    Copy a manually chosen region.

    The region is clamped into the image; the output is always
    max(1, round(width)) x max(1, round(height)), scaling the clamped pixels
    when they differ from that size.

    Args:
        image: Source surface
        region: Region in source-pixel coordinates

    Returns:
        Cropped surface
    """
    target_width, target_height = region.output_size
    cropped = crop_to_region(image, region)

    if cropped.shape[1] == target_width and cropped.shape[0] == target_height:
        return cropped

    try:
        return cv2.resize(cropped, (target_width, target_height), interpolation=cv2.INTER_LINEAR)
    except (cv2.error, MemoryError) as e:
        raise SurfaceAllocationException("manual crop", str(e)) from e


def apply_ratio_crop(image: np.ndarray, ratio: float, strategy: FocalStrategy) -> np.ndarray:
    """
    Crop the image to an aspect ratio.

    Args:
        image: Source surface
        ratio: Desired width / height
        strategy: Places the crop window

    Returns:
        Cropped surface
    """
    img_height, img_width = image.shape[:2]
    crop_width, crop_height = compute_ratio_crop_size(img_width, img_height, ratio)

    region = strategy.select_region(image, crop_width, crop_height)
    logger.debug(
        f"Ratio crop {img_width}x{img_height} -> {crop_width}x{crop_height} "
        f"at ({region.x}, {region.y}) via {strategy.__class__.__name__}"
    )
    return crop_to_region(image, region)
