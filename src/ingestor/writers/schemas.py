"""
PyArrow schema construction for parsed tables.

Uploads have no fixed schema, so the Parquet layout is derived from the
inferred column types of each table.
"""

from collections.abc import Sequence
from typing import Optional

import pyarrow as pa

from ingestor.enums import ColumnType
from ingestor.models import ParsedTable, header_index, serialize_value
from ingestor.workflow import ColumnTypeMap, infer_positional_types

# Inferred column type -> Arrow type
ARROW_TYPES = {
    ColumnType.NUMBER: pa.float64(),
    ColumnType.DATE: pa.string(),
    ColumnType.STRING: pa.string(),
}

METADATA_PREFIX = "ingestor."


def unique_names(headers: Sequence[str]) -> list[str]:
    """
    Column names safe for Parquet, which needs them distinct.

    Later duplicates get a ``_2``, ``_3``... suffix.

    Example:
        >>> unique_names(["a", "b", "a"])
        ['a', 'b', 'a_2']
    """
    seen: set[str] = set()
    names: list[str] = []
    for header in headers:
        name = header
        n = 1
        while name in seen:
            n += 1
            name = f"{header}_{n}"
        seen.add(name)
        names.append(name)
    return names


def schema_for_table(
    table: ParsedTable,
    types: Optional[ColumnTypeMap] = None,
) -> pa.Schema:
    """
    Build the Arrow schema for a table.

    Each field carries its inferred type and original header in the field
    metadata; table provenance goes into the schema metadata. Columns are
    typed by position, so a repeated header never borrows the type of an
    earlier column with the same name.

    Args:
        table: The parsed table
        types: Column types by header name; they apply to the first column
            of each name, the rest are inferred

    Returns:
        pa.Schema with one nullable field per column
    """
    column_types = infer_positional_types(table)
    if types is not None:
        for header, position in header_index(table.headers).items():
            column_types[position] = types.get(header, ColumnType.STRING)

    fields = []
    for header, name, column_type in zip(table.headers, unique_names(table.headers), column_types):
        fields.append(
            pa.field(
                name,
                ARROW_TYPES[column_type],
                nullable=True,
                metadata={b"column_type": column_type.value.encode(), b"header": header.encode()},
            )
        )

    metadata = {}
    for key in ("source_name", "source_format", "delimiter", "encoding", "sheet_name"):
        value = getattr(table, key)
        if value is not None:
            text = str(serialize_value(value))
            metadata[f"{METADATA_PREFIX}{key}".encode()] = text.encode()

    return pa.schema(fields, metadata=metadata)
