"""
Raw line reader for header-row previews.

Reads an upload as text without interpreting its structure, so a person
can see the first lines and say which one holds the column names.
"""

import csv
import logging
from dataclasses import dataclass
from typing import Optional

from ingestor.config import MIB
from ingestor.enums import FileFormat
from ingestor.errors import FileReadError
from ingestor.models import RawTable
from ingestor.tools import SourceFile, detect_format

from .csv_parser import SNIFF_CHARS, detect_delimiter, split_lines
from .encoding import detect_encoding
from .spreadsheet_parser import SpreadsheetParser
from .values import is_blank_row

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_LINES = 20


@dataclass
class RawContent:
    """
    Decoded text of an upload.

    Attributes:
        content: Decoded text (a prefix when ``truncated``)
        encoding: Encoding used to decode the bytes
        truncated: Whether the file was larger than the read limit
        size: Size of the whole file in bytes
    """

    content: str
    encoding: str
    truncated: bool
    size: int

    def lines(self) -> list[str]:
        """Non-blank lines without their line endings."""
        lines = [line.rstrip("\r\n") for line in split_lines(self.content)]
        if self.truncated and lines:
            # The prefix may end mid-line
            lines.pop()
        return [line for line in lines if line.strip()]


class RawLineReader:
    """
    Reads uploads as plain text for previews.

    Usage:
        reader = RawLineReader()
        raw = reader.preview(SourceFile.from_path("export.csv"))

        for row in raw.rows:
            print(row)
    """

    def __init__(self, max_bytes: int = MIB, encoding: Optional[str] = None):
        """
        Initialize the reader.

        Args:
            max_bytes: Read at most this many bytes of large files
            encoding: Force an encoding instead of detecting one
        """
        self.max_bytes = max_bytes
        self.encoding = encoding

    def read(self, source: SourceFile) -> RawContent:
        """
        Read and decode an upload.

        Decoding never fails: undecodable bytes become replacement
        characters.

        Raises:
            FileReadError: If the bytes cannot be read
        """
        data = source.read_bytes(limit=self.max_bytes)
        truncated = source.size > len(data)
        if truncated:
            logger.warning(f"Previewing the first {len(data)} of {source.size} bytes of {source.name}")

        encoding = self.encoding or detect_encoding(data)
        try:
            content = data.decode(encoding, errors="replace")
        except LookupError as e:
            raise FileReadError(f"Unknown encoding: {encoding}", filename=source.name) from e

        return RawContent(content=content, encoding=encoding, truncated=truncated, size=source.size)

    def preview(
        self,
        source: SourceFile,
        max_lines: int = DEFAULT_PREVIEW_LINES,
        delimiter: Optional[str] = None,
    ) -> RawTable:
        """
        First rows of an upload as raw text cells.

        Text files are split into cells with the given (or detected)
        delimiter, and rows whose cells are all blank are skipped. Workbooks show the first sheet's values as
        text.

        Args:
            source: The upload
            max_lines: Maximum rows to return
            delimiter: Field delimiter; detected when None

        Returns:
            RawTable with untyped cells
        """
        if detect_format(source.name) == FileFormat.SPREADSHEET:
            return self._preview_spreadsheet(source, max_lines)

        raw = self.read(source)
        delimiter = delimiter or detect_delimiter(raw.content[:SNIFF_CHARS])
        # Same row numbering as the CSV parser: all-blank rows are not rows
        rows = [
            tuple(row)
            for row in csv.reader(raw.lines(), delimiter=delimiter)
            if not is_blank_row(row)
        ]

        return RawTable(
            rows=tuple(rows[:max_lines]),
            encoding=raw.encoding,
            truncated=raw.truncated,
            total_lines=len(rows),
        )

    def _preview_spreadsheet(self, source: SourceFile, max_lines: int) -> RawTable:
        _, grid = SpreadsheetParser().read_grid(source.read_bytes(), name=source.name, limit=max_lines)
        rows = tuple(tuple("" if cell is None else str(cell) for cell in row) for row in grid)
        return RawTable(rows=rows, truncated=False, total_lines=len(rows))
