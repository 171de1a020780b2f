"""Decode winget's console tables into records."""
from .models import (
    ColumnHeader,
    ColumnLayout,
    CommandResult,
    Record,
)
from .errors import (
    ParseFailure,
    WingetError,
    TableParseError,
    ErrorSignatureDetected,
    MissingSeparator,
    MalformedHeader,
    InsufficientColumns,
    MalformedRow,
    WingetNotFoundError,
    WingetTimeoutError,
)
from .table_parser import parse_table

__all__ = [
    "ColumnHeader",
    "ColumnLayout",
    "CommandResult",
    "Record",
    "ParseFailure",
    "WingetError",
    "TableParseError",
    "ErrorSignatureDetected",
    "MissingSeparator",
    "MalformedHeader",
    "InsufficientColumns",
    "MalformedRow",
    "WingetNotFoundError",
    "WingetTimeoutError",
    "parse_table",
]
