"""
Processing options for a batch run.

The UI layer sends camelCase keys (``targetWidth``); Python callers use the
snake_case field names. Both are accepted.
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from pixbatch.common.constants import OverlayConstants, ProcessingConstants
from pixbatch.common.enums import OutputFormat, WatermarkPosition
from pixbatch.utils import parse_enum, round_half_up


class ProcessOptions(BaseModel):
    """Options applied to every image of a batch."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    # === Target size ===
    target_width: float = Field(
        default=ProcessingConstants.DEFAULT_TARGET_WIDTH, description="Target width in pixels"
    )
    target_height: float = Field(
        default=ProcessingConstants.DEFAULT_TARGET_HEIGHT, description="Target height in pixels"
    )
    auto_width: bool = Field(default=False, description="Derive width from height and ratio")
    auto_height: bool = Field(default=False, description="Derive height from width and ratio")

    # === Crop ratio ===
    ratio_x: float = Field(default=ProcessingConstants.DEFAULT_RATIO, description="Ratio width")
    ratio_y: float = Field(default=ProcessingConstants.DEFAULT_RATIO, description="Ratio height")

    # === Algorithms ===
    use_high_quality: bool = Field(default=True, description="Use area/Lanczos resampling")
    auto_focal: bool = Field(default=True, description="Place auto crop by saliency")
    skip_resize: bool = Field(default=False, description="Keep source dimensions")

    # === Encoding ===
    output_format: OutputFormat = Field(default=OutputFormat.ORIGINAL)
    quality: float = Field(
        default=ProcessingConstants.DEFAULT_QUALITY,
        description="Encode quality 1-100 (clamped by the encoder; non-finite uses the default)",
    )

    # === Border ===
    border_color: str = Field(default=OverlayConstants.DEFAULT_BORDER_COLOR)
    border_thickness: int = Field(default=OverlayConstants.DEFAULT_BORDER_THICKNESS, ge=0)

    # === Watermark ===
    watermark_text: str = Field(default="")
    watermark_size: float = Field(default=OverlayConstants.DEFAULT_WATERMARK_SIZE)
    watermark_opacity: float = Field(
        default=OverlayConstants.DEFAULT_WATERMARK_OPACITY,
        description="Text alpha (<= 0 disables the watermark, above 1 draws opaque)",
    )
    watermark_position: WatermarkPosition = Field(default=WatermarkPosition.BOTTOM_RIGHT)

    # === Naming ===
    rename_pattern: str = Field(default=ProcessingConstants.DEFAULT_RENAME_PATTERN)
    start_number: Optional[int] = Field(
        default=ProcessingConstants.DEFAULT_START_NUMBER, description="Sequence base"
    )

    @field_validator("ratio_x", "ratio_y", mode="before")
    @classmethod
    def normalize_ratio(cls, v):
        """Missing or zero ratio parts count as 1; parts never drop below 1."""
        if v is None:
            return 1
        try:
            v = float(v)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid ratio part: {v!r}") from e
        return max(1.0, v or 1.0)

    @field_validator("output_format", mode="before")
    @classmethod
    def parse_output_format(cls, v):
        """Unknown formats keep the source format."""
        return parse_enum(v, OutputFormat, OutputFormat.ORIGINAL, normalize=True)

    @field_validator("watermark_position", mode="before")
    @classmethod
    def parse_watermark_position(cls, v):
        """Unknown positions fall back to the bottom-right corner."""
        return parse_enum(v, WatermarkPosition, WatermarkPosition.BOTTOM_RIGHT, normalize=True)

    @property
    def ratio(self) -> float:
        """Desired crop aspect ratio (width / height)."""
        return self.ratio_x / self.ratio_y

    def derive_target_size(self) -> Tuple[int, int]:
        """
        Resolve the output size before cropping.

        When exactly one of auto_width/auto_height is set, the other
        dimension comes from the crop ratio; otherwise the explicit values
        are used.

        Returns:
            Tuple of (width, height); may contain non-positive values
        """
        width = round_half_up(self.target_width)
        height = round_half_up(self.target_height)

        if self.auto_width and not self.auto_height:
            width = round_half_up(height * (self.ratio_x / self.ratio_y))
        elif self.auto_height and not self.auto_width:
            height = round_half_up(width * (self.ratio_y / self.ratio_x))

        return width, height

    def to_dict(self) -> Dict[str, Any]:
        """Export options with enum values converted to strings."""
        return self.model_dump(mode="json")
