"""
Error types for the ingestion pipeline.

Every failure that ends a parse attempt is an IngestError. The ``kind``
attribute keeps the user-facing categories distinguishable regardless of
how the message is worded:

- wrong_type: the file extension is not supported
- unreadable: the bytes could not be read, decoded or parsed
- too_large: the file exceeds the size ceiling
- cancelled: the caller aborted the parse
"""

from typing import Optional


class IngestError(Exception):
    """Base class for fatal ingestion failures."""

    kind = "unreadable"
    default_message = "The file could not be processed."

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.filename = filename

    @property
    def user_message(self) -> str:
        """Human-readable message for display next to the upload."""
        if self.filename:
            return f"{self.default_message} ({self.filename})"
        return self.default_message


class FileFormatError(IngestError):
    """Unsupported file extension."""

    kind = "wrong_type"
    default_message = "Unsupported file type. Please upload a CSV or Excel file."


class FileReadError(IngestError):
    """I/O or decoding failure while reading raw bytes or text."""

    kind = "unreadable"
    default_message = "The file could not be read."


class ParseError(IngestError):
    """Structural failure inside CSV or spreadsheet parsing."""

    kind = "unreadable"
    default_message = "The file appears to be corrupt or unreadable."


class ValidationError(IngestError):
    """Pre-flight check failure, raised before any parsing."""

    kind = "too_large"
    default_message = "The file is too large."


class ParseCancelled(IngestError):
    """The caller cancelled a running parse."""

    kind = "cancelled"
    default_message = "The upload was cancelled."
