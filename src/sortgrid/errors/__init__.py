"""Custom exception hierarchy for SortGrid."""

from __future__ import annotations


class SortGridError(Exception):
    """Base class for all custom errors raised by SortGrid."""


class ConfigurationError(SortGridError):
    """Raised when a table is built from an invalid column set or options.

    Covers duplicate column ids, value types without a registered comparator,
    a server-mode table without a data source and malformed configuration
    documents.  Always raised at construction time, never while sorting.
    """


class InvalidSortRequest(SortGridError):
    """Raised when a sort names an unknown or non-sortable column."""

    def __init__(self, column_id: object, reason: str = "unknown column") -> None:
        super().__init__(f"Cannot sort by {column_id!r}: {reason}")
        self.column_id = column_id
        self.reason = reason


class DataSourceError(SortGridError):
    """Raised when the data source fails to deliver a page of rows."""


class SettingsError(SortGridError):
    """Base class for table settings failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be read or parsed."""


class SettingsValidationError(SettingsError, ConfigurationError):
    """Raised when settings data fails schema validation."""


__all__ = [
    "ConfigurationError",
    "DataSourceError",
    "InvalidSortRequest",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
    "SortGridError",
]
