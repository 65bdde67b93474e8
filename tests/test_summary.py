"""Tests for dataset-level summary metrics."""

import math

import pytest

from openrange.features.summary import finite_mean, finite_median, hit_rate, summarize
from openrange.types import DailyRow

NAN = float("nan")


def _row(
    date: str,
    pct_change_5min: float = 0.01,
    pct_move: float = 0.02,
    direction_peak: int = 1,
    hit_5min_dir: int = 1,
    close_11am: float = 100.0,
) -> DailyRow:
    return DailyRow(
        date=date,
        open_day=100.0,
        high_5min=101.0,
        low_5min=99.0,
        close_5min=101.0,
        range_5min=2.0,
        body_5min=1.0,
        pct_change_5min=pct_change_5min,
        volume_5min=5000.0,
        vwap_5min=100.5,
        high_to_11am=102.0,
        low_to_11am=99.0,
        close_11am=close_11am,
        range_to_11am=3.0,
        pct_change_to_11am=0.0,
        pct_move=pct_move,
        direction_peak=direction_peak,
        hit_5min_dir=hit_5min_dir,
    )


class TestFiniteStatistics:
    """Tests for finite-only mean and median."""

    def test_mean_ignores_nan(self) -> None:
        """NaN values do not enter the mean."""
        assert finite_mean([1.0, NAN, 3.0]) == pytest.approx(2.0)

    def test_median_even_count(self) -> None:
        """Even-length medians average the two middle values."""
        assert finite_median([4.0, 1.0, NAN, 3.0, 2.0]) == pytest.approx(2.5)

    def test_empty_is_nan(self) -> None:
        """An empty finite set gives NaN, not zero."""
        assert math.isnan(finite_mean([]))
        assert math.isnan(finite_median([NAN, NAN]))


class TestHitRate:
    """Tests for hit_rate."""

    def test_counts_directional_rows_only(self) -> None:
        """Rows with direction 0 are excluded from the denominator."""
        rows = [
            _row("2024-01-02", direction_peak=1, hit_5min_dir=1),
            _row("2024-01-03", direction_peak=-1, hit_5min_dir=0),
            _row("2024-01-04", direction_peak=0, hit_5min_dir=0),
            _row("2024-01-05", direction_peak=1, hit_5min_dir=1),
        ]
        assert hit_rate(rows) == pytest.approx(2 / 3)

    def test_no_directional_rows_is_nan(self) -> None:
        """Without any directional day the rate is undefined."""
        assert math.isnan(hit_rate([_row("2024-01-02", direction_peak=0, hit_5min_dir=0)]))


class TestSummarize:
    """Tests for summarize."""

    def test_metrics(self) -> None:
        """All metrics are computed over the given rows."""
        rows = [
            _row("2024-01-02", pct_change_5min=0.01, pct_move=0.03),
            _row("2024-01-03", pct_change_5min=NAN, pct_move=-0.01,
                 direction_peak=-1, hit_5min_dir=0, close_11am=NAN),
            _row("2024-01-04", pct_change_5min=0.03, pct_move=NAN,
                 direction_peak=0, hit_5min_dir=0),
        ]
        metrics = summarize(rows, days_dropped=2)

        assert metrics.days_processed == 3
        assert metrics.days_dropped_first5_incomplete == 2
        assert metrics.pct_missing_close_11am == pytest.approx(100 / 3)
        assert metrics.mean_pct_change_5min == pytest.approx(0.02)
        assert metrics.median_pct_change_5min == pytest.approx(0.02)
        assert metrics.mean_pct_move == pytest.approx(0.01)
        assert metrics.median_pct_move == pytest.approx(0.01)
        assert metrics.hit_rate_5min_dir == pytest.approx(0.5)

    def test_empty_batch(self) -> None:
        """No rows: zero missing percentage and NaN statistics."""
        metrics = summarize([], days_dropped=1)

        assert metrics.days_processed == 0
        assert metrics.days_dropped_first5_incomplete == 1
        assert metrics.pct_missing_close_11am == 0.0
        assert math.isnan(metrics.mean_pct_change_5min)
        assert math.isnan(metrics.median_pct_move)
        assert math.isnan(metrics.hit_rate_5min_dir)

    def test_table_formatting(self) -> None:
        """Values use fixed precision and NaN for missing."""
        metrics = summarize([_row("2024-01-02", pct_change_5min=0.0123456789)], days_dropped=0)
        table = dict(metrics.as_table())

        assert table["days_processed"] == "1"
        assert table["pct_missing_close_11am"] == "0.00"
        assert table["mean_pct_change_5min"] == "0.012346"
        assert table["hit_rate_5min_dir"] == "1.0000"

        empty = dict(summarize([], days_dropped=0).as_table())
        assert empty["mean_pct_move"] == "NaN"
        assert list(empty) == [
            "days_processed",
            "days_dropped_first5_incomplete",
            "pct_missing_close_11am",
            "mean_pct_change_5min",
            "median_pct_change_5min",
            "mean_pct_move",
            "median_pct_move",
            "hit_rate_5min_dir",
        ]
