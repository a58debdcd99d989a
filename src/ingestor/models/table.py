"""
Canonical table models.

ParsedTable is the single structure handed to every consumer of an upload
(charting, recommendation, persistence). RawTable is the untyped grid shown
while a header row is being chosen.
"""

from collections.abc import Iterator, Mapping
from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import Field, model_validator

from ingestor.config import PREVIEW_SIZE
from ingestor.enums import FileFormat

from .base import IngestModel, serialize_value

# Cell values after parsing. The Python type is the variant tag.
CellValue = Union[int, float, str, date, datetime, None]


def header_index(headers: tuple[str, ...]) -> dict[str, int]:
    """Map each header name to its first position."""
    index: dict[str, int] = {}
    for position, name in enumerate(headers):
        index.setdefault(name, position)
    return index


class Record(Mapping):
    """
    One data row, positionally aligned to the table headers.

    Behaves as a read-only mapping from header name to value. With duplicate
    header names, lookups return the first matching column; the positional
    values remain available through ``values_tuple``.
    """

    __slots__ = ("_headers", "_values", "_index")

    def __init__(
        self,
        headers: tuple[str, ...],
        values: tuple[CellValue, ...],
        index: Optional[dict[str, int]] = None,
    ):
        if len(values) != len(headers):
            raise ValueError(
                f"Record has {len(values)} values for {len(headers)} headers"
            )
        self._headers = headers
        self._values = values
        self._index = index if index is not None else header_index(headers)

    def __getitem__(self, key: str) -> CellValue:
        return self._values[self._index[key]]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{h!r}: {v!r}" for h, v in zip(self._headers, self._values))
        return f"Record({{{pairs}}})"

    @property
    def headers(self) -> tuple[str, ...]:
        return self._headers

    @property
    def values_tuple(self) -> tuple[CellValue, ...]:
        """Values in header order, including duplicate-named columns."""
        return self._values

    def to_dict(self) -> dict[str, Any]:
        return {h: serialize_value(v) for h, v in zip(self._headers, self._values)}


class ParsedTable(IngestModel):
    """
    Normalized result of ingesting one file.

    Attributes:
        headers: Column names in file order (duplicates are allowed)
        rows: Data records in file order, each aligned to ``headers``
        source_name: Original filename, if known
        source_format: Branch that produced the table
        delimiter: Detected CSV delimiter
        encoding: Text encoding used to decode a CSV file
        sheet_name: Worksheet read from a spreadsheet
    """

    headers: tuple[str, ...] = Field(default_factory=tuple)
    rows: tuple[Record, ...] = Field(default_factory=tuple)

    source_name: Optional[str] = None
    source_format: Optional[FileFormat] = None
    delimiter: Optional[str] = None
    encoding: Optional[str] = None
    sheet_name: Optional[str] = None

    @model_validator(mode="after")
    def _check_alignment(self) -> "ParsedTable":
        width = len(self.headers)
        for position, record in enumerate(self.rows):
            if len(record) != width:
                raise ValueError(
                    f"Row {position} has {len(record)} entries, expected {width}"
                )
        return self

    @property
    def row_count(self) -> int:
        """Number of data rows, excluding the header."""
        return len(self.rows)

    @property
    def preview(self) -> tuple[Record, ...]:
        """The first rows of the table, sharing the same Record objects."""
        return self.rows[:PREVIEW_SIZE]

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def column(self, name: str) -> list[CellValue]:
        """Values of the first column called ``name``."""
        position = self.headers.index(name)
        return [record.values_tuple[position] for record in self.rows]

    def to_dict(self) -> dict:
        """Convert to the serialized table shape used by consumers."""
        output: dict[str, Any] = {
            "headers": list(self.headers),
            "rows": [record.to_dict() for record in self.rows],
            "rowCount": self.row_count,
            "preview": [record.to_dict() for record in self.preview],
        }
        for key in ("source_name", "source_format", "delimiter", "encoding", "sheet_name"):
            value = getattr(self, key)
            if value is not None:
                output[key] = serialize_value(value)
        return output


class RawTable(IngestModel):
    """
    Untyped rows used to pick a header row.

    Attributes:
        rows: Raw text cells per line
        encoding: Encoding used to decode the text (None for spreadsheets)
        truncated: Whether only a prefix of the file was read
        total_lines: Non-blank rows seen in the text that was read
    """

    rows: tuple[tuple[str, ...], ...] = Field(default_factory=tuple)
    encoding: Optional[str] = None
    truncated: bool = False
    total_lines: int = 0

    @property
    def width(self) -> int:
        """Widest row in the preview."""
        return max((len(row) for row in self.rows), default=0)
