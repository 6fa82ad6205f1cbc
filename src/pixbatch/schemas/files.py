"""
Input and output file models.

This module contains the byte-buffer models exchanged with collaborators:
- InputFile: raw image bytes plus the metadata used for identity and mime checks
- ProcessedImage: the immutable result of one pipeline run
"""

import os
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from pixbatch.common.constants import FormatConstants


def file_key(name: str, last_modified: int) -> str:
    """Identity key associating a manual crop with an input file."""
    return f"{name}-{last_modified}"


class InputFile(BaseModel):
    """An image supplied to the pipeline."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False, description="Raw encoded image bytes")
    mime_type: str = Field(..., description="Declared mime type")
    name: str = Field(..., description="Display name including extension")
    last_modified: int = Field(default=0, description="Modification time in milliseconds")

    @property
    def key(self) -> str:
        """File-identity key (name + modification timestamp)."""
        return file_key(self.name, self.last_modified)

    @property
    def is_supported(self) -> bool:
        """Whether the declared mime type is one the loader accepts."""
        return self.mime_type in FormatConstants.ACCEPTED_MIME_TYPES

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "InputFile":
        """
        Read an input file from disk.

        Args:
            path: Path to the image file

        Returns:
            InputFile with mime type derived from the extension

        Raises:
            FileNotFoundError: If file does not exist
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image file not found: {path}")

        mime_type = FormatConstants.EXTENSION_TO_MIME.get(
            path.suffix.lower(), "application/octet-stream"
        )
        last_modified = int(os.path.getmtime(path) * 1000)

        return cls(
            data=path.read_bytes(),
            mime_type=mime_type,
            name=path.name,
            last_modified=last_modified,
        )


class ProcessedImage(BaseModel):
    """Final output artifact of the pipeline."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Output file name with extension")
    data: bytes = Field(..., repr=False, description="Encoded image bytes")
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    mime_type: str

    @property
    def size_bytes(self) -> int:
        """Encoded size in bytes."""
        return len(self.data)
