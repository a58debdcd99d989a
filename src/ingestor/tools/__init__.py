"""
Tools module for upload description and format detection.

Module structure:
- types.py: SourceFile and FileInfo dataclasses
- detection.py: Format detection and MIME type lookup
"""

from .detection import (
    EXTENSIONS,
    detect_file,
    detect_format,
    get_mime_type,
    is_large_file,
    require_supported,
)
from .types import FileInfo, SourceFile

__all__ = [
    # Types
    "SourceFile",
    "FileInfo",
    # Detection functions
    "EXTENSIONS",
    "detect_format",
    "detect_file",
    "get_mime_type",
    "is_large_file",
    "require_supported",
]
