"""
Pre-flight validation for uploads.

Cheap checks on name and size that run before any byte is parsed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ingestor.config import LARGE_FILE_THRESHOLD, MAX_FILE_SIZE
from ingestor.errors import FileFormatError, ValidationError
from ingestor.tools import EXTENSIONS, SourceFile

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = tuple(EXTENSIONS)


@dataclass
class ValidationIssue:
    """A single validation issue."""

    field: str
    message: str
    severity: str  # "error", "warning"
    value: Optional[Any] = None


@dataclass
class ValidationResult:
    """Result of validating an upload."""

    is_valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        """Get only error-level issues."""
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        """Get only warning-level issues."""
        return [i for i in self.issues if i.severity == "warning"]

    def add_error(self, field: str, message: str, value: Any = None) -> None:
        """Add an error issue."""
        self.issues.append(
            ValidationIssue(field=field, message=message, severity="error", value=value)
        )
        self.is_valid = False

    def add_warning(self, field: str, message: str, value: Any = None) -> None:
        """Add a warning issue."""
        self.issues.append(
            ValidationIssue(field=field, message=message, severity="warning", value=value)
        )


class UploadValidator:
    """
    Validates an upload before parsing.

    Checks:
    1. Extension - must be csv, xlsx or xls
    2. Size - must not exceed the ceiling
    3. Content hints - empty files and streaming-sized files are noted

    Usage:
        validator = UploadValidator(max_size=UPLOAD_LIMIT)
        result = validator.validate(SourceFile.from_path("sales.csv"))

        if not result.is_valid:
            for issue in result.errors:
                print(f"ERROR: {issue.field}: {issue.message}")
    """

    def __init__(
        self,
        max_size: int = MAX_FILE_SIZE,
        large_file_threshold: int = LARGE_FILE_THRESHOLD,
    ):
        """
        Initialize the validator.

        Args:
            max_size: Largest accepted size in bytes
            large_file_threshold: Size at which CSV parsing streams
        """
        self.max_size = max_size
        self.large_file_threshold = large_file_threshold

    def validate(self, source: SourceFile) -> ValidationResult:
        """
        Validate an upload.

        Args:
            source: The upload to check

        Returns:
            ValidationResult with issues found
        """
        result = ValidationResult(is_valid=True)

        extension = source.extension
        if extension not in ALLOWED_EXTENSIONS:
            result.add_error(
                "extension",
                f"Unsupported file type '{extension or '(none)'}' (CSV, XLSX or XLS only)",
                extension,
            )

        if source.size > self.max_size:
            result.add_error(
                "size",
                f"File is {source.size} bytes, the limit is {self.max_size}",
                source.size,
            )
        elif source.size == 0:
            result.add_warning("size", "File is empty")
        elif extension == "csv" and source.size >= self.large_file_threshold:
            result.add_warning("size", "Large CSV file, will be parsed in streaming mode", source.size)

        return result


def validate_upload(source: SourceFile, max_size: int = MAX_FILE_SIZE) -> ValidationResult:
    """
    Convenience function to validate an upload.

    Args:
        source: The upload to check
        max_size: Largest accepted size in bytes

    Returns:
        ValidationResult with issues found
    """
    return UploadValidator(max_size=max_size).validate(source)


def check_upload(source: SourceFile, max_size: int = MAX_FILE_SIZE) -> None:
    """
    Fail fast on an upload that cannot be ingested.

    Raises:
        FileFormatError: If the extension is not supported
        ValidationError: If the file exceeds ``max_size``
    """
    result = validate_upload(source, max_size=max_size)
    for issue in result.errors:
        logger.info(f"Rejected {source.name}: {issue.message}")
        if issue.field == "extension":
            raise FileFormatError(issue.message, filename=source.name)
        raise ValidationError(issue.message, filename=source.name)
