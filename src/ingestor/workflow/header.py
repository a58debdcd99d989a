"""
Header row selection.

Uploads often carry a title block above the real header. The first parse
always treats physical row 0 as the header; these functions move the
header down afterwards, identically for CSV and spreadsheet tables.
"""

import logging
import math
import re
from collections.abc import Sequence
from typing import Any, Optional, Union

from ingestor.models import ParsedTable, RawTable, header_index

from .assembler import assemble_records, make_record, normalize_headers, provenance_of

logger = logging.getLogger(__name__)

# Longest leading decimal literal, the way a lenient float parser reads it
LEADING_NUMBER = re.compile(r"\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def select_header_row(table: ParsedTable, start_row: int) -> ParsedTable:
    """
    Re-derive a table using a later physical row as the header.

    ``start_row`` counts physical rows from the original header, so row
    ``start_row - 1`` of ``table.rows`` becomes the header and the rows
    after it become data. Always apply to the original parse: chaining
    calls consumes one more header layer each time.

    Args:
        table: Table from the initial parse
        start_row: Physical row index of the new header row

    Returns:
        A new ParsedTable, or ``table`` itself when ``start_row <= 0``
    """
    if start_row <= 0:
        return table

    provenance = provenance_of(table)

    if start_row > table.row_count:
        logger.warning(
            f"Header row {start_row} is past the last row ({table.row_count}); "
            f"keeping headers with no data rows"
        )
        return assemble_records(table.headers, (), **provenance)

    header_record = table.rows[start_row - 1]
    headers = normalize_headers(header_record.values_tuple)
    index = header_index(headers)
    records = (
        make_record(headers, record.values_tuple, index)
        for record in table.rows[start_row:]
    )
    logger.info(f"Using row {start_row} as header: {list(headers)}")
    return assemble_records(headers, records, **provenance)


def leading_number(value: Any) -> Optional[float]:
    """
    Finite number at the start of a cell, or None.

    Lenient on purpose: ``"2024-01-15"`` reads as 2024 and ``"12 kg"`` as 12,
    so data rows of dates and quantities with units still look numeric.

    Example:
        >>> leading_number("12 kg")
        12.0
        >>> leading_number("Infinity") is None
        True
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    match = LEADING_NUMBER.match(str(value))
    if match is None:
        return None
    number = float(match.group())
    return number if math.isfinite(number) else None


def _numeric_count(row: Sequence[Any]) -> int:
    return sum(1 for cell in row if leading_number(cell) is not None)


def recommend_start_row(rows: Union[RawTable, Sequence[Sequence[Any]]]) -> int:
    """
    Suggest the physical row where data starts.

    Picks the row with the most cells that start with a finite number;
    ties keep the earliest row.
    Advisory only, nothing applies it automatically.

    Args:
        rows: A RawTable or rows of cells

    Returns:
        Zero-based row index (0 when no row has numeric cells)
    """
    if isinstance(rows, RawTable):
        rows = rows.rows

    best_row = 0
    best_count = 0
    for position, row in enumerate(rows):
        count = _numeric_count(row)
        if count > best_count:
            best_count = count
            best_row = position
    return best_row


def recommend_header_row(rows: Union[RawTable, Sequence[Sequence[Any]]]) -> int:
    """The row just above the recommended data start, as a ``start_row``."""
    return max(recommend_start_row(rows) - 1, 0)
