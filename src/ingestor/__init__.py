"""
Data Ingestor - Tabular upload ingestion and type inference.

This package turns CSV, XLSX and XLS uploads into a canonical ParsedTable
(ordered headers plus header-aligned records), with header row
reselection and per-column type inference for downstream consumers.
"""

__version__ = "0.1.0"

from ingestor.config import IngestConfig
from ingestor.enums import ColumnType, FileFormat, ParseStrategy
from ingestor.errors import (
    FileFormatError,
    FileReadError,
    IngestError,
    ParseCancelled,
    ParseError,
    ValidationError,
)
from ingestor.models import ParsedTable, RawTable, Record
from ingestor.parsers import CancelToken, CSVParser, RawLineReader, SpreadsheetParser
from ingestor.pipeline import HeaderPreview, IngestPipeline, ingest_file
from ingestor.tools import FileInfo, SourceFile, detect_file, detect_format
from ingestor.validation import UploadValidator, ValidationResult
from ingestor.workflow import (
    infer_column_types,
    infer_table_types,
    recommend_start_row,
    select_header_row,
)
from ingestor.writers import JSONWriter, ParquetWriter, write_table

__all__ = [
    # Configuration
    "IngestConfig",
    # Enums
    "FileFormat",
    "ParseStrategy",
    "ColumnType",
    # Errors
    "IngestError",
    "FileFormatError",
    "FileReadError",
    "ParseError",
    "ValidationError",
    "ParseCancelled",
    # Models
    "ParsedTable",
    "RawTable",
    "Record",
    # File detection tools
    "SourceFile",
    "FileInfo",
    "detect_file",
    "detect_format",
    # Parsers
    "CSVParser",
    "SpreadsheetParser",
    "RawLineReader",
    "CancelToken",
    # Workflow
    "IngestPipeline",
    "HeaderPreview",
    "ingest_file",
    "select_header_row",
    "recommend_start_row",
    "infer_column_types",
    "infer_table_types",
    # Validation
    "UploadValidator",
    "ValidationResult",
    # Writers
    "JSONWriter",
    "ParquetWriter",
    "write_table",
]
