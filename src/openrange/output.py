"""Tabular rendering of daily rows and summary metrics."""

from __future__ import annotations

import csv
import io
import math
from enum import Enum
from pathlib import Path
from typing import Any, Sequence, TextIO

from openrange.exceptions import StorageError
from openrange.types import OUTPUT_COLUMNS, DailyRow, SummaryMetrics


def format_value(value: Any) -> str:
    """Render one cell: ``NaN`` for missing numbers, empty for None."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return "NaN"
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def _write_rows(handle: TextIO, rows: Sequence[DailyRow]) -> None:
    writer = csv.writer(handle, lineterminator="\n")
    writer.writerow(OUTPUT_COLUMNS)
    for row in rows:
        record = row.to_record()
        writer.writerow([format_value(record[column]) for column in OUTPUT_COLUMNS])


def format_daily_rows(rows: Sequence[DailyRow]) -> str:
    """Render rows as CSV text with a header line."""
    buffer = io.StringIO()
    _write_rows(buffer, rows)
    return buffer.getvalue()


def write_daily_rows(rows: Sequence[DailyRow], path: str | Path) -> Path:
    """Write rows to a CSV file, creating parent directories.

    :param rows: Daily rows in output order.
    :param path: Destination file.
    :returns: The path written.
    :raises StorageError: If the file cannot be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="", encoding="utf-8") as f:
            _write_rows(f, rows)
    except OSError as e:
        raise StorageError(f"Failed to write output file '{path}': {e}") from e
    return path


def format_summary(metrics: SummaryMetrics) -> str:
    """Render the ``metric,value`` summary table."""
    lines = ["metric,value"]
    lines.extend(f"{metric},{value}" for metric, value in metrics.as_table())
    return "\n".join(lines)


__all__ = ["format_value", "format_daily_rows", "write_daily_rows", "format_summary"]
