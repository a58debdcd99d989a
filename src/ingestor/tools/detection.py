"""
File format detection utilities.

Functions for choosing a parsing branch from a filename and byte size.
"""

import logging
from pathlib import Path

from ingestor.config import LARGE_FILE_THRESHOLD
from ingestor.enums import FileFormat, ParseStrategy
from ingestor.errors import FileFormatError

from .types import FileInfo

logger = logging.getLogger(__name__)

# Extension -> format
EXTENSIONS = {
    "csv": FileFormat.CSV,
    "xlsx": FileFormat.SPREADSHEET,
    "xls": FileFormat.SPREADSHEET,
}

MIME_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "xls": "application/vnd.ms-excel",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def _extension(filename: str | Path) -> str:
    return Path(filename).suffix.lower().lstrip(".")


def detect_format(filename: str | Path) -> FileFormat:
    """
    Detect the parsing branch of a file from its extension.

    Args:
        filename: File name or path

    Returns:
        FileFormat enum value

    Example:
        >>> detect_format("sales.CSV")
        FileFormat.CSV
        >>> detect_format("report.xls")
        FileFormat.SPREADSHEET
    """
    return EXTENSIONS.get(_extension(filename), FileFormat.UNSUPPORTED)


def get_mime_type(filename: str | Path) -> str:
    """MIME type implied by the extension."""
    return MIME_TYPES.get(_extension(filename), DEFAULT_MIME_TYPE)


def is_large_file(size: int, threshold: int = LARGE_FILE_THRESHOLD) -> bool:
    """Whether a file is large enough to be parsed in streaming mode."""
    return size >= threshold


def detect_file(
    filename: str | Path,
    size: int,
    large_file_threshold: int = LARGE_FILE_THRESHOLD,
) -> FileInfo:
    """
    Detect format and parsing strategy for an upload.

    Size only matters for CSV files: large ones are streamed. Spreadsheets
    are always parsed as a complete document.

    Args:
        filename: File name or path
        size: Size in bytes
        large_file_threshold: Size at which CSV parsing switches to streaming

    Returns:
        FileInfo with format, strategy and MIME type
    """
    file_format = detect_format(filename)
    is_large = is_large_file(size, large_file_threshold)

    if file_format == FileFormat.CSV:
        strategy = ParseStrategy.CSV_STREAMING if is_large else ParseStrategy.CSV_WHOLE
    elif file_format == FileFormat.SPREADSHEET:
        strategy = ParseStrategy.SPREADSHEET
    else:
        strategy = ParseStrategy.UNSUPPORTED

    info = FileInfo(
        name=Path(filename).name,
        size=size,
        extension=_extension(filename),
        file_format=file_format,
        strategy=strategy,
        mime_type=get_mime_type(filename),
        is_large=is_large,
    )
    logger.debug(f"Detected {info.name}: {file_format.value} via {strategy.value}")
    return info


def require_supported(filename: str | Path) -> FileFormat:
    """
    Detect the format, failing for unsupported extensions.

    Raises:
        FileFormatError: If the extension is not csv, xlsx or xls
    """
    file_format = detect_format(filename)
    if file_format == FileFormat.UNSUPPORTED:
        ext = _extension(filename) or "(none)"
        raise FileFormatError(
            f"Unsupported file format: {ext}",
            filename=Path(filename).name,
        )
    return file_format
