"""Exception hierarchy for winget invocation and table decoding."""
from __future__ import annotations

import enum


class ParseFailure(str, enum.Enum):
    """Why a captured table could not be decoded."""
    ERROR_SIGNATURE_DETECTED = "error_signature_detected"
    MISSING_SEPARATOR = "missing_separator"
    MALFORMED_HEADER = "malformed_header"
    INSUFFICIENT_COLUMNS = "insufficient_columns"
    MALFORMED_ROW = "malformed_row"


class WingetError(Exception):
    """Base exception for winget-mcp."""


class TableParseError(WingetError, ValueError):
    """Raised when captured output cannot be decoded into records."""

    reason: ParseFailure

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.reason.value}: {self.message}"


class ErrorSignatureDetected(TableParseError):
    """Output contains a known winget failure message."""

    reason = ParseFailure.ERROR_SIGNATURE_DETECTED

    def __init__(self, signature: str, line_index: int):
        super().__init__(f"line {line_index} matches {signature!r}")
        self.signature = signature
        self.line_index = line_index


class MissingSeparator(TableParseError):
    """No dash-only separator line; the output is not tabular."""

    reason = ParseFailure.MISSING_SEPARATOR


class MalformedHeader(TableParseError):
    """Separator found but no usable header line above it."""

    reason = ParseFailure.MALFORMED_HEADER


class InsufficientColumns(TableParseError):
    """Header line yields fewer than two columns."""

    reason = ParseFailure.INSUFFICIENT_COLUMNS


class MalformedRow(TableParseError):
    """A data line is too short for the column layout."""

    reason = ParseFailure.MALFORMED_ROW

    def __init__(self, message: str, line_index: int = -1, line: str = ""):
        super().__init__(message)
        self.line_index = line_index
        self.line = line


class WingetNotFoundError(WingetError):
    """The winget executable could not be started."""


class WingetTimeoutError(WingetError):
    """A winget invocation exceeded its timeout."""
