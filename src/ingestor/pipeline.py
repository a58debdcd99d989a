"""
Ingestion pipeline.

The main orchestrator: validate, detect, parse, optionally re-header.
Each call owns its parser and accumulator, so pipelines can run in
parallel threads without sharing state.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ingestor.config import IngestConfig
from ingestor.enums import FileFormat, ParseStrategy
from ingestor.errors import FileFormatError
from ingestor.models import ParsedTable, RawTable
from ingestor.parsers import CancelToken, CSVParser, RawLineReader, SpreadsheetParser
from ingestor.parsers.csv_parser import ProgressCallback
from ingestor.tools import SourceFile, detect_file
from ingestor.validation import check_upload
from ingestor.workflow import (
    ColumnTypeMap,
    infer_table_types,
    recommend_header_row,
    recommend_start_row,
    select_header_row,
)

logger = logging.getLogger(__name__)


@dataclass
class HeaderPreview:
    """
    Raw rows of an upload with an advisory header suggestion.

    Attributes:
        raw: The untyped preview rows
        recommended_start_row: Row where data most likely starts
        recommended_header_row: ``start_row`` value that would use the row
            above the data as header
    """

    raw: RawTable
    recommended_start_row: int
    recommended_header_row: int


class IngestPipeline:
    """
    Turns an upload into a ParsedTable.

    Workflow:
    1. Pre-flight validation (extension, size)
    2. Format detection (CSV whole-file, CSV streaming, spreadsheet)
    3. Parsing into a canonical table with row 0 as header
    4. Optional header row reselection

    Example:
        pipeline = IngestPipeline()
        source = SourceFile.from_path("/uploads/sales.csv")

        preview = pipeline.preview(source)
        table = pipeline.ingest(source, start_row=preview.recommended_header_row)
        types = pipeline.column_types(table)
    """

    def __init__(self, config: Optional[IngestConfig] = None):
        self.config = config or IngestConfig()

    def ingest(
        self,
        source: SourceFile,
        start_row: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelToken] = None,
    ) -> ParsedTable:
        """
        Parse an upload.

        Args:
            source: The upload
            start_row: Physical row to use as header (None or 0 keeps row 0)
            on_progress: Called with a fraction in [0, 1]
            cancel: Token checked between chunks

        Returns:
            The assembled ParsedTable

        Raises:
            FileFormatError: Unsupported extension
            ValidationError: File above the size ceiling
            FileReadError: The content could not be read
            ParseError: The content could not be parsed
            ParseCancelled: ``cancel`` was triggered
        """
        check_upload(source, max_size=self.config.max_file_size)

        info = detect_file(source.name, source.size, self.config.large_file_threshold)
        logger.info(f"Ingesting {info.name} ({info.size} bytes) via {info.strategy.value}")

        if info.file_format == FileFormat.CSV:
            parser = CSVParser(
                chunk_size=self.config.chunk_size,
                high_water_mark=self.config.high_water_mark,
                encoding=self.config.encoding,
            )
            with source.open() as stream:
                table = parser.parse(
                    stream,
                    size=source.size,
                    name=source.name,
                    on_progress=on_progress,
                    cancel=cancel,
                    streaming=info.strategy == ParseStrategy.CSV_STREAMING,
                )
        elif info.file_format == FileFormat.SPREADSHEET:
            table = SpreadsheetParser().parse(
                source.read_bytes(),
                name=source.name,
                on_progress=on_progress,
                cancel=cancel,
            )
        else:
            raise FileFormatError(f"Unsupported file format: {info.extension}", filename=info.name)

        if start_row:
            table = select_header_row(table, start_row)

        logger.info(f"Ingested {info.name}: {table.row_count} rows, {len(table.headers)} columns")
        return table

    def preview(self, source: SourceFile, max_lines: Optional[int] = None) -> HeaderPreview:
        """
        Raw rows for choosing a header row.

        Args:
            source: The upload
            max_lines: Rows to show (defaults to the configured preview size)

        Returns:
            HeaderPreview with the rows and a recommendation
        """
        check_upload(source, max_size=self.config.max_file_size)

        reader = RawLineReader(max_bytes=self.config.raw_preview_bytes, encoding=self.config.encoding)
        raw = reader.preview(source, max_lines=max_lines or self.config.raw_preview_lines)
        return HeaderPreview(
            raw=raw,
            recommended_start_row=recommend_start_row(raw),
            recommended_header_row=recommend_header_row(raw),
        )

    @staticmethod
    def column_types(table: ParsedTable) -> ColumnTypeMap:
        """Per-column types, computed on demand."""
        return infer_table_types(table)


def ingest_file(
    path: str | Path,
    start_row: Optional[int] = None,
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[IngestConfig] = None,
) -> ParsedTable:
    """
    Convenience function to ingest a file on disk.

    Example:
        table = ingest_file("/uploads/report.xlsx", start_row=2)
        print(table.headers, table.row_count)
    """
    pipeline = IngestPipeline(config)
    return pipeline.ingest(SourceFile.from_path(path), start_row=start_row, on_progress=on_progress)
