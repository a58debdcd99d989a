"""
File parsers for upload ingestion.

Provides parsers for:
- Delimited text files (CSV, TSV, pipe, semicolon), streamed in chunks
- Spreadsheet workbooks (.xlsx, .xls), first sheet only
- Raw text previews for header-row selection
"""

from ingestor.parsers.channel import CancelToken, RowChannel
from ingestor.parsers.csv_parser import (
    CANDIDATE_DELIMITERS,
    CSVParser,
    CSVRowStream,
    detect_delimiter,
)
from ingestor.parsers.encoding import detect_encoding
from ingestor.parsers.raw_reader import RawContent, RawLineReader
from ingestor.parsers.spreadsheet_parser import SpreadsheetParser, detect_flavor, normalize_cell
from ingestor.parsers.values import coerce_cell, is_blank, is_blank_row, is_numeric, parse_number

__all__ = [
    # CSV
    "CSVParser",
    "CSVRowStream",
    "CANDIDATE_DELIMITERS",
    "detect_delimiter",
    "detect_encoding",
    # Spreadsheet
    "SpreadsheetParser",
    "detect_flavor",
    "normalize_cell",
    # Raw preview
    "RawLineReader",
    "RawContent",
    # Backpressure and cancellation
    "RowChannel",
    "CancelToken",
    # Cell values
    "parse_number",
    "coerce_cell",
    "is_blank",
    "is_blank_row",
    "is_numeric",
]
