"""
Writers module for persisting parsed tables to Parquet and JSON files.

Module structure:
- schemas.py: PyArrow schema construction from inferred column types
- serializers.py: Cell-to-Arrow conversion utilities
- parquet_writer.py: ParquetWriter class
- json_writer.py: JSONWriter class
"""

from pathlib import Path

from ingestor.models import ParsedTable

from .json_writer import JSONEncoder, JSONWriter
from .parquet_writer import ParquetWriter, default_name
from .schemas import ARROW_TYPES, schema_for_table, unique_names
from .serializers import column_array, table_columns, to_number, to_text

__all__ = [
    # Schemas
    "ARROW_TYPES",
    "schema_for_table",
    "unique_names",
    # Serializers
    "column_array",
    "table_columns",
    "to_number",
    "to_text",
    # Writers
    "ParquetWriter",
    "JSONWriter",
    "JSONEncoder",
    "default_name",
    # Convenience functions
    "write_table",
]

WRITERS = {
    "json": JSONWriter,
    "parquet": ParquetWriter,
}


def write_table(
    table: ParsedTable,
    output_dir: str | Path,
    output_format: str = "parquet",
    name: str | None = None,
) -> Path:
    """
    Convenience function to write a table in the given format.

    Args:
        table: The parsed table
        output_dir: Directory for the output file
        output_format: ``parquet`` or ``json``
        name: Output file stem (defaults to the source file stem)

    Returns:
        Path to the written file

    Example:
        table = ingest_file("sales.csv")
        path = write_table(table, "/data/out", "json")
    """
    try:
        writer_class = WRITERS[output_format]
    except KeyError:
        raise ValueError(f"Unknown output format: {output_format}") from None
    return writer_class(output_dir).write(table, name=name)
