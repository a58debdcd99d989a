"""
Command-line interface for data-ingestor.

Provides commands for detecting, previewing, validating and parsing
tabular uploads.
"""

from .main import app, main

__all__ = ["main", "app"]
