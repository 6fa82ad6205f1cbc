"""
Output file naming.

Patterns support these case-insensitive placeholders, substituted in order:
- ORIGINAL-NAME: source name without its extension
- {width} / {height}: final output dimensions
- xx, xxx, ...: the sequence number, zero-padded to the run length
  (sequence 5 under "xxx" gives "005", under "xxxx" gives "0005")
"""

import re

from pixbatch.core.image.converters import mime_to_extension

_ORIGINAL_NAME = re.compile(r"ORIGINAL-NAME", re.IGNORECASE)
_WIDTH = re.compile(r"\{width\}", re.IGNORECASE)
_HEIGHT = re.compile(r"\{height\}", re.IGNORECASE)
_SEQUENCE = re.compile(r"x{2,}", re.IGNORECASE)
_EXTENSION = re.compile(r"\.[^/.]+$")


def strip_extension(name: str) -> str:
    """Source name without its last extension."""
    return _EXTENSION.sub("", name)


def render_pattern(pattern: str, base_name: str, width: int, height: int, sequence: int) -> str:
    """
    Substitute placeholders in a naming pattern.

    Args:
        pattern: Naming pattern
        base_name: Source name without extension
        width: Final width
        height: Final height
        sequence: Sequence number

    Returns:
        Pattern with all placeholders replaced
    """
    name = _ORIGINAL_NAME.sub(lambda _: base_name, pattern)
    name = _WIDTH.sub(str(width), name)
    name = _HEIGHT.sub(str(height), name)
    return _SEQUENCE.sub(lambda m: str(sequence).rjust(len(m.group(0)), "0"), name)


def build_output_name(
    source_name: str,
    width: int,
    height: int,
    mime_type: str,
    pattern: str,
    index: int,
    start_number: int = 0,
) -> str:
    """
    Derive an output file name.

    Args:
        source_name: Original file name (extension is stripped)
        width: Final width
        height: Final height
        mime_type: Mime type of the encoded output
        pattern: Naming pattern; blank uses "{base}-{width}x{height}"
        index: Zero-based position in the batch
        start_number: Sequence base (None counts as 0)

    Returns:
        File name with extension

    Example:
        >>> build_output_name("photo.png", 800, 600, "image/jpeg",
        ...                   "ORIGINAL-NAME_{width}x{height}_xxx", 4, 1)
        'photo_800x600_005.jpg'
        >>> build_output_name("photo.png", 800, 600, "image/jpeg",
        ...                   "ORIGINAL-NAME_{width}x{height}_xxxx", 4, 1)
        'photo_800x600_0005.jpg'
    """
    base_name = strip_extension(source_name)
    sequence = (start_number or 0) + index

    fallback = f"{base_name}-{width}x{height}"
    safe_pattern = (pattern or "").strip() or fallback

    name = render_pattern(safe_pattern, base_name, width, height, sequence)
    if not name.strip():
        name = fallback

    return f"{name}.{mime_to_extension(mime_type)}"
