"""
Parquet file writer for parsed tables.

Writes a ParsedTable as a single Parquet file whose columns are typed
from the inferred column types.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import pyarrow as pa
import pyarrow.parquet as pq

from ingestor.models import ParsedTable
from ingestor.workflow import ColumnTypeMap

from .schemas import schema_for_table
from .serializers import table_columns

logger = logging.getLogger(__name__)


def default_name(table: ParsedTable) -> str:
    """Output file stem for a table: its source file stem, or ``table``."""
    if table.source_name:
        return Path(table.source_name).stem or "table"
    return "table"


class ParquetWriter:
    """
    Writes parsed tables to Parquet files.

    Example:
        writer = ParquetWriter("/data/uploads")
        path = writer.write(table)

        print(pq.read_table(path).schema)
    """

    def __init__(self, output_dir: str | Path):
        """
        Initialize the writer with an output directory.

        Args:
            output_dir: Directory for output files, created if missing
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def to_arrow(self, table: ParsedTable, types: Optional[ColumnTypeMap] = None) -> pa.Table:
        """
        Convert a parsed table to an Arrow table.

        Args:
            table: The parsed table
            types: Precomputed column types (inferred when None)

        Returns:
            pa.Table with one typed column per header
        """
        schema = schema_for_table(table, types)
        return pa.Table.from_arrays(table_columns(table, schema), schema=schema)

    def write(
        self,
        table: ParsedTable,
        name: str | None = None,
        types: Optional[ColumnTypeMap] = None,
    ) -> Path:
        """
        Write a parsed table to Parquet.

        Args:
            table: The parsed table
            name: Output file stem (defaults to the source file stem)
            types: Precomputed column types (inferred when None)

        Returns:
            Path to the written file
        """
        output_path = self.output_dir / f"{name or default_name(table)}.parquet"
        pq.write_table(self.to_arrow(table, types), output_path)
        logger.info(f"Wrote {table.row_count} rows to {output_path}")
        return output_path
