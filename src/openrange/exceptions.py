"""Exception hierarchy for the opening-range feature engine.

All project exceptions derive from :class:`OpenRangeError` so callers can
catch every project error uniformly. Record-level problems derive from
:class:`DataValidationError`; the pipeline absorbs them and counts what it
dropped instead of failing the batch.
"""

from __future__ import annotations


class OpenRangeError(Exception):
    """Base class for project exceptions.

    Derived exceptions should extend this class so that callers can catch all
    project-specific errors uniformly.
    """


class ConfigError(OpenRangeError):
    """Raised when configuration files or parameters are invalid."""


class DataSourceError(OpenRangeError):
    """Raised when accessing or processing a data source fails."""


class StorageError(OpenRangeError):
    """Raised when writing output fails."""


class DataValidationError(OpenRangeError):
    """Raised when a single record fails validation.

    Named DataValidationError to avoid conflict with pydantic's ValidationError.
    """


class UnparseableTimestamp(DataValidationError):
    """Raised when a date/time pair matches none of the accepted layouts."""

    def __init__(self, date_raw: str, time_raw: str | None = None) -> None:
        self.date_raw = date_raw
        self.time_raw = time_raw
        shown = date_raw if time_raw is None else f"{date_raw} {time_raw}"
        super().__init__(f"Unparseable timestamp: '{shown}'")


class IncompleteOpeningRange(DataValidationError):
    """Raised when a day lacks one or more mandatory opening-range bars."""

    def __init__(self, date: str, missing: list[str]) -> None:
        self.date = date
        self.missing = list(missing)
        super().__init__(
            f"Opening range incomplete for {date}: missing {', '.join(self.missing)}"
        )


__all__ = [
    "OpenRangeError",
    "ConfigError",
    "DataSourceError",
    "StorageError",
    "DataValidationError",
    "UnparseableTimestamp",
    "IncompleteOpeningRange",
]
