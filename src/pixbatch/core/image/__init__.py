"""
Image processing utilities - functional architecture.

This package provides the pipeline stages as focused functions:
- loader: decoding into BGRA surfaces with scoped release
- crop: manual crop, ratio crop and focal strategies
- processors: resizing
- overlay: border and watermark compositing
- converters: color parsing, mime resolution and encoding
- naming: output file names

All utilities are re-exported from this module for convenient access.
"""

# Converter functions
from pixbatch.core.image.converters import (
    encode_surface,
    ensure_bgra,
    mime_to_extension,
    normalize_quality,
    parse_color,
    resolve_mime,
)

# Crop engine
from pixbatch.core.image.crop import (
    CenterFocalStrategy,
    FocalStrategy,
    SaliencyFocalStrategy,
    apply_manual_crop,
    apply_ratio_crop,
    compute_ratio_crop_size,
    crop_to_region,
    get_focal_strategy,
)

# Loader
from pixbatch.core.image.loader import DecodedSource, decode_source, load_surface, open_source

# Naming
from pixbatch.core.image.naming import build_output_name, strip_extension

# Overlay functions
from pixbatch.core.image.overlay import apply_border, apply_watermark

# Processor functions
from pixbatch.core.image.processors import resize_surface

__all__ = [
    # Converter functions
    "encode_surface",
    "ensure_bgra",
    "mime_to_extension",
    "normalize_quality",
    "parse_color",
    "resolve_mime",
    # Crop engine
    "CenterFocalStrategy",
    "FocalStrategy",
    "SaliencyFocalStrategy",
    "apply_manual_crop",
    "apply_ratio_crop",
    "compute_ratio_crop_size",
    "crop_to_region",
    "get_focal_strategy",
    # Loader
    "DecodedSource",
    "decode_source",
    "load_surface",
    "open_source",
    # Naming
    "build_output_name",
    "strip_extension",
    # Overlay functions
    "apply_border",
    "apply_watermark",
    # Processor functions
    "resize_surface",
]
