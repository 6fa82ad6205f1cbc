"""
Custom exceptions for the pixbatch pipeline.
Provides consistent error handling across all processing stages.
"""

from typing import Dict, Optional


class PixbatchException(Exception):
    """Base exception for pixbatch."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UnsupportedFormatException(PixbatchException):
    """Exception raised when an input mime type is not accepted."""

    def __init__(self, mime_type: str, name: Optional[str] = None):
        super().__init__(
            message=ErrorMessages.UNSUPPORTED_FORMAT.format(mime_type=mime_type or "unknown"),
            details={"mime_type": mime_type, "name": name},
        )


class NoValidInputsException(UnsupportedFormatException):
    """Exception raised when a batch contains no accepted images."""

    def __init__(self, rejected: int = 0):
        PixbatchException.__init__(
            self,
            message=ErrorMessages.NO_VALID_INPUTS,
            details={"rejected": rejected},
        )


class InvalidDimensionsException(PixbatchException):
    """Exception raised when target dimensions are not positive."""

    def __init__(self, width: float, height: float):
        super().__init__(
            message=ErrorMessages.INVALID_DIMENSIONS.format(width=width, height=height),
            details={"width": width, "height": height},
        )


class DecodeFailureException(PixbatchException):
    """Exception raised when source bytes cannot be decoded."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            message=ErrorMessages.DECODE_FAILED.format(name=name, error=reason),
            details={"name": name, "reason": reason},
        )


class SurfaceAllocationException(PixbatchException):
    """Exception raised when a stage cannot obtain a drawing buffer."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=ErrorMessages.SURFACE_ALLOCATION_FAILED.format(
                operation=operation, error=reason
            ),
            details={"operation": operation, "reason": reason},
        )


class EncodeFailureException(PixbatchException):
    """Exception raised when a surface cannot be encoded."""

    def __init__(self, mime_type: str, reason: str):
        super().__init__(
            message=ErrorMessages.ENCODE_FAILED.format(mime_type=mime_type, error=reason),
            details={"mime_type": mime_type, "reason": reason},
        )


# Standard Messages
class ErrorMessages:
    """Standard error messages."""

    # Input errors
    UNSUPPORTED_FORMAT = "Unsupported image type: {mime_type} (expected JPEG/PNG/WebP/AVIF)"
    NO_VALID_INPUTS = "Please select supported images (JPEG/PNG/WebP/AVIF)"
    DECODE_FAILED = "Unable to read image file {name}: {error}"

    # Option errors
    INVALID_DIMENSIONS = "Target width and height must be greater than 0 (got {width}x{height})"

    # Processing errors
    SURFACE_ALLOCATION_FAILED = "Unable to create drawing surface for {operation}: {error}"
    ENCODE_FAILED = "Failed to encode image as {mime_type}: {error}"

    # Export errors
    OUTPUT_EXISTS = "Output file already exists: {path}"
    DUPLICATE_OUTPUT = "Output name used more than once in the batch: {name}"
