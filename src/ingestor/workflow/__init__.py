"""
Workflow module for turning parsed rows into canonical tables.

Module structure:
- assembler.py: ParsedTable assembly (header normalization, row alignment)
- header.py: Header row selection and start-row recommendation
- inference.py: Column type inference
"""

from .assembler import (
    align_values,
    assemble_records,
    assemble_table,
    make_record,
    normalize_headers,
)
from .header import (
    leading_number,
    recommend_header_row,
    recommend_start_row,
    select_header_row,
)
from .inference import (
    TYPE_THRESHOLD,
    ColumnTypeMap,
    infer_column_type,
    infer_column_types,
    infer_positional_types,
    infer_table_types,
    is_date_value,
)

__all__ = [
    # Assembly
    "assemble_table",
    "assemble_records",
    "make_record",
    "align_values",
    "normalize_headers",
    # Header rows
    "select_header_row",
    "recommend_start_row",
    "recommend_header_row",
    "leading_number",
    # Type inference
    "TYPE_THRESHOLD",
    "ColumnTypeMap",
    "infer_column_type",
    "infer_column_types",
    "infer_table_types",
    "infer_positional_types",
    "is_date_value",
]
