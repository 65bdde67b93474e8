"""Tests for CSV rendering of daily rows and summaries."""

import csv
from pathlib import Path

import pytest

from openrange.commands.demo import demo_rows
from openrange.exceptions import StorageError
from openrange.features.summary import summarize
from openrange.output import (format_daily_rows, format_summary, format_value,
                              write_daily_rows)
from openrange.pipeline import process_rows
from openrange.types import OUTPUT_COLUMNS, DailyRow, TouchDirection


@pytest.fixture
def rows() -> list[DailyRow]:
    """Daily rows for the sample day."""
    return process_rows(demo_rows()).daily_rows


class TestFormatValue:
    """Tests for single-cell rendering."""

    def test_missing_number_is_nan_token(self) -> None:
        """Non-finite floats render as NaN."""
        assert format_value(float("nan")) == "NaN"
        assert format_value(float("inf")) == "NaN"

    def test_none_is_empty(self) -> None:
        """An absent touch direction renders empty."""
        assert format_value(None) == ""

    def test_enum_renders_value(self) -> None:
        """Touch directions render as up/down."""
        assert format_value(TouchDirection.UP) == "up"
        assert format_value(TouchDirection.DOWN) == "down"

    def test_numbers(self) -> None:
        """Integral floats drop the trailing .0; others round-trip."""
        assert format_value(6700.0) == "6700"
        assert format_value(100.9) == "100.9"
        assert format_value(-1) == "-1"
        assert float(format_value(0.1 + 0.2)) == 0.1 + 0.2


class TestFormatDailyRows:
    """Tests for format_daily_rows."""

    def test_header_in_column_order(self, rows: list[DailyRow]) -> None:
        """The header lists the fixed output columns."""
        lines = format_daily_rows(rows).splitlines()
        assert lines[0] == ",".join(OUTPUT_COLUMNS)
        assert len(lines) == 2

    def test_row_values(self, rows: list[DailyRow]) -> None:
        """Cells are rendered per column."""
        record = next(csv.DictReader(format_daily_rows(rows).splitlines()))

        assert record["date"] == "2024-01-02"
        assert record["open_day"] == "100"
        assert record["volume_5min"] == "6700"
        assert record["direction_peak"] == "1"
        assert record["time_first_touch"] == "up"

    def test_empty_rows_header_only(self) -> None:
        """No rows still renders the header."""
        assert format_daily_rows([]).strip() == ",".join(OUTPUT_COLUMNS)


class TestWriteDailyRows:
    """Tests for write_daily_rows."""

    def test_writes_file_and_parents(self, rows: list[DailyRow], tmp_path: Path) -> None:
        """The output directory is created and the CSV written."""
        target = tmp_path / "out" / "nested" / "daily.csv"
        written = write_daily_rows(rows, target)

        assert written == target
        assert target.read_text(encoding="utf-8") == format_daily_rows(rows)

    def test_unwritable_path_raises(self, rows: list[DailyRow], tmp_path: Path) -> None:
        """Write failures surface as StorageError."""
        blocker = tmp_path / "file.txt"
        blocker.write_text("x")

        with pytest.raises(StorageError, match="Failed to write output file"):
            write_daily_rows(rows, blocker / "daily.csv")


def test_format_summary(rows: list[DailyRow]) -> None:
    """The summary renders as a metric,value table."""
    text = format_summary(summarize(rows, days_dropped=0))
    lines = text.splitlines()

    assert lines[0] == "metric,value"
    assert "days_processed,1" in lines
    assert "mean_pct_move,0.035000" in lines
    assert "hit_rate_5min_dir,1.0000" in lines
    assert len(lines) == 9
