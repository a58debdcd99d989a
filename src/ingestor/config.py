"""
Ingestion settings.

A single frozen settings object is passed down to the parsers so that one
parse never observes another parse's tuning.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

MIB = 1024 * 1024

DEFAULT_CHUNK_SIZE = 1 * MIB
LARGE_FILE_THRESHOLD = 5 * MIB
HIGH_WATER_MARK = 50_000
PREVIEW_SIZE = 10
UPLOAD_LIMIT = 10 * MIB
MAX_FILE_SIZE = 100 * MIB


class IngestConfig(BaseModel):
    """
    Tuning knobs for the ingestion pipeline.

    Attributes:
        chunk_size: Bytes read per chunk by the streaming CSV parser
        large_file_threshold: Size at which CSV files switch to streaming
        high_water_mark: Maximum rows buffered between tokenizer and consumer
        raw_preview_bytes: Prefix read by the raw line reader for large files
        raw_preview_lines: Rows shown when choosing a header row
        max_file_size: Sanity ceiling for pre-flight validation
        upload_limit: Ceiling enforced at the upload boundary
        encoding: Force a text encoding instead of detecting one
    """

    model_config = ConfigDict(frozen=True)

    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)
    large_file_threshold: int = Field(default=LARGE_FILE_THRESHOLD, gt=0)
    high_water_mark: int = Field(default=HIGH_WATER_MARK, gt=0)
    raw_preview_bytes: int = Field(default=1 * MIB, gt=0)
    raw_preview_lines: int = Field(default=20, gt=0)
    max_file_size: int = Field(default=MAX_FILE_SIZE, gt=0)
    upload_limit: int = Field(default=UPLOAD_LIMIT, gt=0)
    encoding: Optional[str] = None
