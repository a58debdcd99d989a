"""
Column type inference.

Classifies each column as number, date or string from its values. The
0.8 threshold tolerates a few dirty cells without committing to a type on
the strength of a handful of values.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser

from ingestor.enums import ColumnType
from ingestor.models import ParsedTable
from ingestor.parsers.values import is_blank, is_numeric

TYPE_THRESHOLD = 0.8

# ISO yyyy-mm-dd prefix, d/d/yyyy prefix, or a complete d-d-yyyy
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}|^\d{1,2}/\d{1,2}/\d{4}|^\d{1,2}-\d{1,2}-\d{4}$")

ColumnTypeMap = dict[str, ColumnType]


def is_date_value(value: Any) -> bool:
    """Whether a cell holds a date, either typed or as recognizable text."""
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str):
        return False

    text = value.strip()
    if not DATE_PATTERN.match(text):
        return False
    try:
        date_parser.parse(text)
    except (ValueError, OverflowError):
        return False
    return True


def infer_column_type(values: Iterable[Any]) -> ColumnType:
    """Classify one column's values."""
    present = [v for v in values if not is_blank(v)]
    if not present:
        return ColumnType.STRING

    numeric = sum(1 for v in present if is_numeric(v))
    if numeric / len(present) > TYPE_THRESHOLD:
        return ColumnType.NUMBER

    dates = sum(1 for v in present if is_date_value(v))
    if dates / len(present) > TYPE_THRESHOLD:
        return ColumnType.DATE

    return ColumnType.STRING


def infer_column_types(
    rows: Sequence[Mapping[str, Any]],
    headers: Sequence[str],
) -> ColumnTypeMap:
    """
    Classify every column of a table.

    Args:
        rows: Records keyed by header name
        headers: Column names to classify

    Returns:
        Mapping from header name to ColumnType
    """
    return {header: infer_column_type(row.get(header) for row in rows) for header in headers}


def infer_table_types(table: ParsedTable) -> ColumnTypeMap:
    """Classify every column of a ParsedTable."""
    return infer_column_types(table.rows, table.headers)


def infer_positional_types(table: ParsedTable) -> list[ColumnType]:
    """
    Classify every column by position.

    Unlike the header-keyed map, columns sharing a header name are
    classified separately.
    """
    return [
        infer_column_type(record.values_tuple[position] for record in table.rows)
        for position in range(len(table.headers))
    ]
