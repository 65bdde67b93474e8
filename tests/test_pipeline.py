"""End-to-end tests for the raw-row pipeline."""

import math
import random

import pytest

from openrange.commands.demo import demo_rows
from openrange.output import format_daily_rows
from openrange.pipeline import process_bars, process_rows
from openrange.types import TouchDirection


def _row(date: str, time: str, price: float = 100.0, volume: str = "1000") -> dict[str, str]:
    return {
        "date": date,
        "time": time,
        "open": str(price),
        "high": str(price + 0.5),
        "low": str(price - 0.5),
        "close": str(price + 0.1),
        "volume": volume,
    }


def _opening_rows(date: str, skip: str | None = None) -> list[dict[str, str]]:
    times = ["09:30:00", "09:31:00", "09:32:00", "09:33:00", "09:34:00"]
    return [_row(date, t, 100.0 + i * 0.1) for i, t in enumerate(times) if t != skip]


@pytest.fixture
def multi_day_rows() -> list[dict[str, str]]:
    """Three sessions, the middle one missing its 09:32 bar."""
    rows = demo_rows()
    rows += _opening_rows("2024-01-03", skip="09:32:00") + [_row("2024-01-03", "10:00:00")]
    rows += _opening_rows("2024-01-04") + [
        _row("2024-01-04", "09:45:00", 98.0),
        _row("2024-01-04", "11:00:00", 99.0),
    ]
    return rows


class TestProcessRows:
    """Tests for process_rows."""

    def test_demo_day(self) -> None:
        """The sample day matches its hand-computed features."""
        result = process_rows(demo_rows())

        assert result.days_dropped == 0
        assert len(result.daily_rows) == 1
        row = result.daily_rows[0]
        assert row.date == "2024-01-02"
        assert row.open_day == 100.0
        assert row.close_5min == 100.9
        assert row.high_5min == 101.5
        assert row.low_5min == 99.5
        assert row.range_5min == pytest.approx(2.0)
        assert row.body_5min == pytest.approx(0.9)
        assert row.pct_change_5min == pytest.approx(0.009)
        assert row.vwap_5min == pytest.approx(675210 / 6700)
        assert row.high_to_11am == 103.5
        assert row.low_to_11am == 98.5
        assert row.pct_move == pytest.approx(0.035)
        assert row.direction_peak == 1
        assert row.hit_5min_dir == 1
        assert row.time_first_touch is TouchDirection.UP

    def test_incomplete_day_dropped_and_counted(
        self, multi_day_rows: list[dict[str, str]]
    ) -> None:
        """A missing opening bar drops exactly that day."""
        result = process_rows(multi_day_rows)

        assert result.days_dropped == 1
        assert [r.date for r in result.daily_rows] == ["2024-01-02", "2024-01-04"]

    def test_missing_cutoff_close_kept(self, multi_day_rows: list[dict[str, str]]) -> None:
        """Days without the 11:00 bar still produce a row."""
        rows = [r for r in multi_day_rows if not (r["date"] == "2024-01-04" and r["time"] == "11:00:00")]
        result = process_rows(rows)

        last = result.daily_rows[-1]
        assert last.date == "2024-01-04"
        assert math.isnan(last.close_11am)

    def test_order_independent(self, multi_day_rows: list[dict[str, str]]) -> None:
        """Any permutation of the input yields the same output."""
        expected = format_daily_rows(process_rows(multi_day_rows).daily_rows)

        rng = random.Random(7)
        for _ in range(5):
            shuffled = list(multi_day_rows)
            rng.shuffle(shuffled)
            assert format_daily_rows(process_rows(shuffled).daily_rows) == expected

    def test_duplicate_rows_last_wins(self) -> None:
        """A re-exported bar replaces the earlier row for the same instant."""
        rows = demo_rows()
        replacement = dict(rows[0], open="95")
        result = process_rows(rows + [replacement])

        assert result.bars_kept == len(rows)
        assert result.daily_rows[0].open_day == 95.0

    def test_discarded_rows_counted(self) -> None:
        """Rows without a usable timestamp are counted, not fatal."""
        rows = demo_rows() + [{"date": "garbage", "open": "1"}, {"open": "1"}]
        result = process_rows(rows)

        assert result.rows_read == len(rows)
        assert result.rows_discarded == 2
        assert len(result.daily_rows) == 1

    def test_offset_timestamps_land_in_trading_zone(self) -> None:
        """UTC-stamped bars are bucketed by New York clock time."""
        rows = [
            {"date": f"2024-01-02T14:3{i}:00Z", "open": "100", "high": "101",
             "low": "99", "close": "100.5", "volume": "10"}
            for i in range(5)
        ]
        result = process_rows(rows)

        assert result.days_dropped == 0
        assert result.daily_rows[0].date == "2024-01-02"

    def test_empty_input(self) -> None:
        """No rows in, no rows out."""
        result = process_rows([])

        assert result.daily_rows == []
        assert result.days_dropped == 0
        assert result.rows_read == 0


def test_process_bars_returns_rows_and_dropped_count() -> None:
    """process_bars works on bars directly."""
    from openrange.data.normalize import normalize_records

    bars = list(normalize_records(_opening_rows("2024-01-05", skip="09:34:00")))
    rows, dropped = process_bars(bars)

    assert rows == []
    assert dropped == 1
