"""
Enums for ingestion metadata.

These enums define the valid values for file formats, parse strategies
and inferred column types.
"""

from enum import Enum


class FileFormat(str, Enum):
    """Parsing branch chosen from the file extension."""

    CSV = "csv"
    SPREADSHEET = "spreadsheet"
    UNSUPPORTED = "unsupported"


class ParseStrategy(str, Enum):
    """Concrete parser used for a file."""

    CSV_WHOLE = "csv_whole"
    CSV_STREAMING = "csv_streaming"
    SPREADSHEET = "spreadsheet"
    UNSUPPORTED = "unsupported"


class ColumnType(str, Enum):
    """Dominant semantic type of a column."""

    NUMBER = "number"
    STRING = "string"
    DATE = "date"
