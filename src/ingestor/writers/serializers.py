"""
Serialization utilities for converting table columns to Arrow arrays.

Cells keep their parsed Python types in a ParsedTable. When a column is
written with a fixed Arrow type, cells that do not fit are converted or
become null.
"""

from datetime import date, datetime, time
from typing import Any, Optional

import pyarrow as pa

from ingestor.enums import ColumnType
from ingestor.models import CellValue, ParsedTable
from ingestor.parsers.values import is_blank, parse_number

from .schemas import ARROW_TYPES


def to_number(value: CellValue) -> Optional[float]:
    """
    Convert a cell to a float, or None when it is not numeric.

    Handles:
    - int/float -> float
    - numeric text -> parsed float
    - blanks and other text -> None
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        number = parse_number(value)
        return None if number is None else float(number)
    return None


def to_text(value: Any) -> Optional[str]:
    """Convert a cell to text; dates become ISO strings, None stays None."""
    if value is None:
        return None
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def column_array(values: list[CellValue], column_type: ColumnType) -> pa.Array:
    """
    Build the Arrow array for one column.

    Args:
        values: Cell values in row order
        column_type: Inferred type of the column

    Returns:
        pa.Array of the column's Arrow type
    """
    if column_type == ColumnType.NUMBER:
        data = [to_number(v) for v in values]
    elif column_type == ColumnType.DATE:
        data = [None if is_blank(v) else to_text(v) for v in values]
    else:
        data = [to_text(v) for v in values]
    return pa.array(data, type=ARROW_TYPES[column_type])


def table_columns(table: ParsedTable, schema: pa.Schema) -> list[pa.Array]:
    """Arrow arrays for every column of ``table``, positionally matching ``schema``."""
    arrays = []
    for position, field in enumerate(schema):
        column_type = ColumnType(field.metadata[b"column_type"].decode())
        values = [record.values_tuple[position] for record in table.rows]
        arrays.append(column_array(values, column_type))
    return arrays
