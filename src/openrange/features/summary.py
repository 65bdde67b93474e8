"""Dataset-level statistics over produced daily rows."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from openrange.features.numeric import NAN, is_finite
from openrange.types import DailyRow, SummaryMetrics


def finite_mean(values: Iterable[float]) -> float:
    """Mean of the finite values, NaN if there are none."""
    arr = np.array([v for v in values if is_finite(v)], dtype=float)
    return float(np.mean(arr)) if arr.size else NAN


def finite_median(values: Iterable[float]) -> float:
    """Median of the finite values, NaN if there are none."""
    arr = np.array([v for v in values if is_finite(v)], dtype=float)
    return float(np.median(arr)) if arr.size else NAN


def hit_rate(rows: Sequence[DailyRow]) -> float:
    """Share of directional days whose opening range pointed the same way."""
    eligible = [
        row for row in rows
        if row.direction_peak != 0 and math.isfinite(row.hit_5min_dir)
    ]
    if not eligible:
        return NAN
    return sum(row.hit_5min_dir for row in eligible) / len(eligible)


def summarize(rows: Sequence[DailyRow], days_dropped: int) -> SummaryMetrics:
    """Compute summary metrics for a batch.

    :param rows: Daily rows produced by the pipeline.
    :param days_dropped: Days dropped for an incomplete opening range.
    :returns: Summary metrics.
    """
    missing_close = sum(1 for row in rows if not is_finite(row.close_11am))
    pct_missing = missing_close / len(rows) * 100 if rows else 0.0

    pct_change_5 = [row.pct_change_5min for row in rows]
    pct_move = [row.pct_move for row in rows]

    return SummaryMetrics(
        days_processed=len(rows),
        days_dropped_first5_incomplete=days_dropped,
        pct_missing_close_11am=pct_missing,
        mean_pct_change_5min=finite_mean(pct_change_5),
        median_pct_change_5min=finite_median(pct_change_5),
        mean_pct_move=finite_mean(pct_move),
        median_pct_move=finite_median(pct_move),
        hit_rate_5min_dir=hit_rate(rows),
    )


__all__ = ["finite_mean", "finite_median", "hit_rate", "summarize"]
