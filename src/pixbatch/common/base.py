"""
Base data models - fundamental types without dependencies.

This module contains basic Pydantic models used throughout the system:
- CropRegion: rectangular region in source-pixel coordinates

IMPORTANT: This module must NOT import from schemas, core or services
to avoid circular dependencies.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from pydantic import BaseModel, Field

from pixbatch.utils import round_half_up


class CropRegion(BaseModel):
    """
    Rectangular region of a source image.

    Coordinates may be fractional (interactive croppers report sub-pixel
    areas); consumers round them when copying pixels.
    """

    x: float = Field(default=0, ge=0, description="X coordinate")
    y: float = Field(default=0, ge=0, description="Y coordinate")
    width: float = Field(..., gt=0, description="Width")
    height: float = Field(..., gt=0, description="Height")

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CropRegion":
        """Create CropRegion from dictionary."""
        return cls(
            x=float(data.get("x", 0)),
            y=float(data.get("y", 0)),
            width=float(data.get("width", 0)),
            height=float(data.get("height", 0)),
        )

    @property
    def x2(self) -> float:
        """Get right edge coordinate."""
        return self.x + self.width

    @property
    def y2(self) -> float:
        """Get bottom edge coordinate."""
        return self.y + self.height

    @property
    def output_size(self) -> Tuple[int, int]:
        """Pixel size of the copied region, never below 1x1."""
        return max(1, round_half_up(self.width)), max(1, round_half_up(self.height))

    def pixel_bounds(self, image_width: int, image_height: int) -> Tuple[int, int, int, int]:
        """
        Integer slice bounds of this region clamped to an image.

        Args:
            image_width: Image width in pixels
            image_height: Image height in pixels

        Returns:
            Tuple of (x1, y1, x2, y2), always covering at least one pixel
        """
        x1 = min(max(round_half_up(self.x), 0), image_width - 1)
        y1 = min(max(round_half_up(self.y), 0), image_height - 1)
        x2 = min(max(round_half_up(self.x2), x1 + 1), image_width)
        y2 = min(max(round_half_up(self.y2), y1 + 1), image_height)
        return x1, y1, x2, y2
