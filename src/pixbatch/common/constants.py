"""
Constants and configuration values for the pixbatch pipeline.
Centralizes all magic numbers and configuration constants.
"""


# Format Constants
class FormatConstants:
    """Constants related to accepted inputs and encoded outputs."""

    # Inputs the loader accepts ("image/jpg" is non-standard but common)
    ACCEPTED_MIME_TYPES = ["image/jpeg", "image/png", "image/webp", "image/avif", "image/jpg"]

    MIME_JPEG = "image/jpeg"
    MIME_PNG = "image/png"
    MIME_WEBP = "image/webp"
    MIME_AVIF = "image/avif"

    # OpenCV encoder extension per mime type
    MIME_TO_ENCODER_EXT = {
        "image/jpeg": ".jpg",
        "image/jpg": ".jpg",
        "image/png": ".png",
        "image/webp": ".webp",
        "image/avif": ".avif",
    }

    # Used when reading inputs from disk
    EXTENSION_TO_MIME = {
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".png": "image/png",
        ".webp": "image/webp",
        ".avif": "image/avif",
    }

    UNKNOWN_EXTENSION = "img"

    # Formats that keep the alpha channel when encoded
    ALPHA_MIME_TYPES = ["image/png", "image/webp", "image/avif"]

    DEFAULT_QUALITY_FRACTION = 0.8
    MIN_QUALITY = 1
    MAX_QUALITY = 100


# Processing Constants
class ProcessingConstants:
    """Defaults for a processing run."""

    DEFAULT_TARGET_WIDTH = 512
    DEFAULT_TARGET_HEIGHT = 512
    DEFAULT_RATIO = 1
    DEFAULT_QUALITY = 80
    DEFAULT_START_NUMBER = 1
    DEFAULT_RENAME_PATTERN = "ORIGINAL-NAME_{width}x{height}_xxx"


# Compositing Constants
class OverlayConstants:
    """Constants for border and watermark compositing."""

    DEFAULT_BORDER_COLOR = "#000000"
    DEFAULT_BORDER_THICKNESS = 0
    FALLBACK_COLOR_BGRA = (0, 0, 0, 255)

    DEFAULT_WATERMARK_SIZE = 24
    DEFAULT_WATERMARK_OPACITY = 0.35
    WATERMARK_MIN_PADDING = 8
    WATERMARK_COLOR_BGRA = (255, 255, 255, 255)

    # Stroke thickness grows with the font height
    WATERMARK_STROKE_DIVISOR = 12


# Saliency Constants
class SaliencyConstants:
    """Constants for the saliency-based focal strategy."""

    # Relative tolerance when comparing window scores
    SCORE_TOLERANCE = 1e-6


# Export Constants
class ExportConstants:
    """Constants for packaging processed images."""

    DEFAULT_ARCHIVE_NAME = "bulk-images.zip"


# System Constants
class SystemConstants:
    """System-wide constants."""

    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT_DEFAULT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
