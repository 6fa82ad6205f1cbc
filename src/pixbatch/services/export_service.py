"""
Export Service - hands processed images to storage.

Packages a batch into a ZIP archive or writes it into a directory. Both
run outside the pipeline; they only consume ProcessedImage values.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import Dict, List, Union

from pixbatch.exceptions import ErrorMessages
from pixbatch.schemas import ProcessedImage

logger = logging.getLogger(__name__)


def build_zip_archive(images: List[ProcessedImage]) -> bytes:
    """
    Pack processed images into a ZIP archive.

    Args:
        images: Images to pack, stored under their names (last one wins
            when a name repeats)

    Returns:
        ZIP archive bytes
    """
    # A repeated name replaces the earlier entry but keeps its position
    entries: Dict[str, bytes] = {}
    for image in images:
        if image.name in entries:
            logger.warning(ErrorMessages.DUPLICATE_OUTPUT.format(name=image.name))
        entries[image.name] = image.data

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)

    logger.info(f"Packed {len(entries)} images into archive ({buffer.tell()} bytes)")
    return buffer.getvalue()


def write_to_directory(
    images: List[ProcessedImage], directory: Union[str, Path], overwrite: bool = False
) -> List[Path]:
    """
    Write processed images into a directory.

    Args:
        images: Images to write
        directory: Target directory (created if missing)
        overwrite: Replace files that already exist; repeated names in
            the batch are then written in order, last one wins

    Returns:
        Paths of the written files

    Raises:
        FileExistsError: If a target exists or a name repeats within the
            batch, and overwrite is False
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    targets = [directory / image.name for image in images]
    if not overwrite:
        seen = set()
        for image in images:
            if image.name in seen:
                raise FileExistsError(ErrorMessages.DUPLICATE_OUTPUT.format(name=image.name))
            seen.add(image.name)
        for path in targets:
            if path.exists():
                raise FileExistsError(ErrorMessages.OUTPUT_EXISTS.format(path=path))

    for image, path in zip(images, targets):
        path.write_bytes(image.data)
        logger.debug(f"Wrote {path} ({image.size_bytes} bytes)")

    logger.info(f"Saved {len(images)} images to {directory}")
    return targets
