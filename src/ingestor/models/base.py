"""
Base model for ingestion results.

Provides common configuration and serialization helpers shared by the
table models.
"""

import json
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


def serialize_value(value: Any) -> Any:
    """Convert a cell or metadata value to a JSON-compatible value."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


class IngestModel(BaseModel):
    """
    Base model for ingestion documents.

    Provides:
    - Immutability (instances are never changed after assembly)
    - Arbitrary types for row containers
    - JSON serialization helpers
    """

    model_config = ConfigDict(
        # Results are replaced, never mutated
        frozen=True,
        # Allow Record and other plain classes as field types
        arbitrary_types_allowed=True,
        # Populate by field name or alias
        populate_by_name=True,
    )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = None) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), default=serialize_value, indent=indent)
