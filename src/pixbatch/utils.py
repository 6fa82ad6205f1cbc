"""
Utility functions for domain-agnostic operations.

- Decorators: timing context manager
- Enum converter: enum parsing with fallback
"""

import logging
import math
import time
from contextlib import contextmanager
from typing import Any, Generator, Type, TypeVar

logger = logging.getLogger(__name__)


@contextmanager
def timer() -> Generator[dict, None, None]:
    """
    Context manager to measure execution time.

    Usage:
        with timer() as t:
            # ... code to time ...
            pass
        print(f"Took {t['ms']}ms")

    Yields:
        Dictionary with 'ms' key containing processing time in milliseconds
    """
    result = {"ms": 0}
    start_time = time.time()
    try:
        yield result
    finally:
        result["ms"] = int((time.time() - start_time) * 1000)


T = TypeVar("T")


def parse_enum(value: Any, enum_class: Type[T], default: T, normalize: bool = False) -> T:
    """
    Parse value to enum with fallback to default.

    Args:
        value: Value to parse (string, enum, or None)
        enum_class: Enum class to parse to
        default: Default enum value if parsing fails
        normalize: Whether to lowercase string before parsing

    Returns:
        Parsed enum value or default

    Example:
        >>> parse_enum("Center", WatermarkPosition, WatermarkPosition.BOTTOM_RIGHT, normalize=True)
        WatermarkPosition.CENTER
    """
    if isinstance(value, enum_class):
        return value

    if value is None:
        return default

    try:
        str_value = value.lower() if normalize else value
        return enum_class(str_value)
    except (ValueError, AttributeError):
        logger.debug(f"Unknown {enum_class.__name__} value {value!r}, using {default}")
        return default


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from negative infinity.

    Pixel math rounds 2.5 to 3; the built-in round() would give 2.
    """
    return int(math.floor(value + 0.5))
