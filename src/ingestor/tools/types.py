"""
Type definitions for uploaded files and their detected format.

Contains dataclasses for representing an upload and what was learned
about it before parsing.
"""

import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from ingestor.enums import FileFormat, ParseStrategy
from ingestor.errors import FileReadError


@dataclass
class SourceFile:
    """
    An uploaded file: a name, a byte size and a way to read the content.

    Content comes either from a path on disk or from an in-memory buffer.

    Attributes:
        name: Original filename (used for format detection)
        size: Size in bytes
        path: Location on disk, if the upload was saved
        data: Raw bytes, if the upload is held in memory
    """

    name: str
    size: int
    path: Optional[str] = None
    data: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: str | Path) -> "SourceFile":
        """Describe a file on disk."""
        path = Path(path)
        try:
            size = path.stat().st_size
        except OSError as e:
            raise FileReadError(f"Cannot stat {path}: {e}", filename=path.name) from e
        return cls(name=path.name, size=size, path=str(path))

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "SourceFile":
        """Describe an in-memory upload."""
        return cls(name=name, size=len(data), data=data)

    @property
    def extension(self) -> str:
        """Lowercase extension without the dot, or an empty string."""
        return Path(self.name).suffix.lower().lstrip(".")

    def open(self) -> BinaryIO:
        """Open the content as a binary stream."""
        if self.data is not None:
            return io.BytesIO(self.data)
        if self.path is None:
            raise FileReadError("Upload has no content", filename=self.name)
        try:
            return open(self.path, "rb")
        except OSError as e:
            raise FileReadError(f"Cannot open {self.path}: {e}", filename=self.name) from e

    def read_bytes(self, limit: Optional[int] = None) -> bytes:
        """Read the whole content, or its first ``limit`` bytes."""
        if self.data is not None:
            return self.data if limit is None else self.data[:limit]
        with self.open() as f:
            try:
                return f.read() if limit is None else f.read(limit)
            except OSError as e:
                raise FileReadError(f"Cannot read {self.path}: {e}", filename=self.name) from e


@dataclass
class FileInfo:
    """
    Information detected from an upload's name and size.

    Attributes:
        name: Filename
        size: Size in bytes
        extension: Lowercase extension without the dot
        file_format: Detected FileFormat
        strategy: Parser that will handle the file
        mime_type: MIME type implied by the extension
        is_large: Whether the size reached the streaming threshold
    """

    name: str
    size: int
    extension: str
    file_format: FileFormat
    strategy: ParseStrategy
    mime_type: str
    is_large: bool = False

    @property
    def is_supported(self) -> bool:
        return self.file_format != FileFormat.UNSUPPORTED
