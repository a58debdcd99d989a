"""
Pydantic models for ingestion results.

These models describe:
- ParsedTable / Record (canonical typed table)
- RawTable (untyped preview grid)
"""

from ingestor.enums import ColumnType, FileFormat, ParseStrategy
from ingestor.models.base import IngestModel, serialize_value
from ingestor.models.table import CellValue, ParsedTable, RawTable, Record, header_index

__all__ = [
    "IngestModel",
    "serialize_value",
    "CellValue",
    "Record",
    "ParsedTable",
    "RawTable",
    "header_index",
    "ColumnType",
    "FileFormat",
    "ParseStrategy",
]
