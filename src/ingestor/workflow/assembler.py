"""
Canonical table assembly.

Every parser and the header row selector build their output here, so the
header normalization and row alignment rules exist exactly once. Values are
never re-typed at this stage.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any, Optional

from ingestor.models import CellValue, ParsedTable, Record, header_index

logger = logging.getLogger(__name__)

PLACEHOLDER_HEADER = "Column {n}"


def header_label(value: Any, position: int) -> str:
    """
    Convert a header cell to a column name.

    Blank cells get a 1-based placeholder label; integral floats drop the
    trailing ``.0`` so a year header reads ``2024`` rather than ``2024.0``.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return PLACEHOLDER_HEADER.format(n=position + 1)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def normalize_headers(values: Iterable[Any]) -> tuple[str, ...]:
    """Column names for a header row."""
    return tuple(header_label(value, i) for i, value in enumerate(values))


def align_values(values: Sequence[CellValue], width: int) -> tuple[CellValue, ...]:
    """Pad missing trailing cells with None and drop extra cells."""
    if len(values) >= width:
        return tuple(values[:width])
    return tuple(values) + (None,) * (width - len(values))


def make_record(
    headers: tuple[str, ...],
    values: Sequence[CellValue],
    index: Optional[dict[str, int]] = None,
) -> Record:
    """Build a Record aligned to ``headers``."""
    return Record(headers, align_values(values, len(headers)), index)


def assemble_records(
    headers: tuple[str, ...],
    records: Iterable[Record],
    **provenance: Any,
) -> ParsedTable:
    """
    Wrap already-aligned records into a ParsedTable.

    Args:
        headers: Normalized column names
        records: Records built with ``make_record`` against ``headers``
        **provenance: source_name, source_format, delimiter, encoding, sheet_name

    Returns:
        The assembled table
    """
    table = ParsedTable(headers=headers, rows=tuple(records), **provenance)
    logger.debug(f"Assembled table: {len(table.headers)} columns, {table.row_count} rows")
    return table


def assemble_table(
    headers: Sequence[Any],
    raw_rows: Iterable[Sequence[CellValue]],
    **provenance: Any,
) -> ParsedTable:
    """
    Build a ParsedTable from a raw header row and raw value rows.

    Args:
        headers: Header cells, as read from the file
        raw_rows: Value rows of any length
        **provenance: source_name, source_format, delimiter, encoding, sheet_name

    Returns:
        ParsedTable whose records all have ``len(headers)`` entries

    Example:
        >>> table = assemble_table(["a", "b"], [[1], [2, 3, 4]])
        >>> [dict(r) for r in table.rows]
        [{'a': 1, 'b': None}, {'a': 2, 'b': 3}]
    """
    names = normalize_headers(headers)
    index = header_index(names)
    records = (make_record(names, row, index) for row in raw_rows)
    return assemble_records(names, records, **provenance)


def provenance_of(table: ParsedTable) -> dict[str, Any]:
    """Source metadata of a table, for carrying over to a derived table."""
    return {
        "source_name": table.source_name,
        "source_format": table.source_format,
        "delimiter": table.delimiter,
        "encoding": table.encoding,
        "sheet_name": table.sheet_name,
    }
