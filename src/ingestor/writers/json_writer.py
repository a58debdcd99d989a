"""
JSON writer for parsed tables.

Writes the serialized table shape (headers, rows, rowCount, preview)
that downstream consumers read.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from ingestor.models import ParsedTable
from ingestor.workflow import ColumnTypeMap, infer_table_types

from .parquet_writer import default_name

logger = logging.getLogger(__name__)


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for date, Enum and Path objects."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date, time)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


class JSONWriter:
    """
    Writes parsed tables to JSON files.

    Example:
        writer = JSONWriter("/data/uploads")
        path = writer.write(table, include_types=True)
    """

    def __init__(self, output_dir: str | Path):
        """
        Initialize the JSON writer.

        Args:
            output_dir: Base directory for output files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write(
        self,
        table: ParsedTable,
        name: str | None = None,
        include_types: bool = False,
        types: Optional[ColumnTypeMap] = None,
    ) -> Path:
        """
        Write a parsed table to JSON.

        Args:
            table: The parsed table
            name: Output file stem (defaults to the source file stem)
            include_types: Add a ``columnTypes`` mapping
            types: Precomputed column types (inferred when None)

        Returns:
            Path to the written JSON file
        """
        record = table.to_dict()
        if include_types or types is not None:
            types = types if types is not None else infer_table_types(table)
            record["columnTypes"] = {header: t.value for header, t in types.items()}

        output_path = self.output_dir / f"{name or default_name(table)}.json"

        with open(output_path, "w") as f:
            json.dump(record, f, cls=JSONEncoder, indent=2)

        logger.info(f"Wrote {table.row_count} rows to {output_path}")
        return output_path
