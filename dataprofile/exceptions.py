"""Custom exceptions for the tabular profiling engine."""

from __future__ import annotations

from typing import Optional


class DataProfileError(Exception):
    """Base exception for all profiling operations."""


class InputError(DataProfileError):
    """Exception raised while acquiring or parsing raw input."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{message} (File: {source})"
        super().__init__(message)


class UnsupportedFormatError(InputError):
    """Exception raised when the file extension is not a supported format."""


class SizeLimitExceededError(InputError):
    """Exception raised when raw input exceeds the configured ceiling."""


class EmptyInputError(InputError):
    """Exception raised when the input has no header line."""


class MalformedRecordError(InputError):
    """Exception raised when a workbook or row cannot be read into records."""


class AnalysisError(DataProfileError):
    """Exception raised during dataset analysis."""


class EmptyDatasetError(AnalysisError):
    """Exception raised when a dataset has a header but no data rows."""
