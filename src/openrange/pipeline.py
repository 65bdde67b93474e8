"""Batch pipeline from raw rows to daily feature rows.

Stages run strictly in order, each consuming its whole input before the next
begins: normalize rows into bars, dedupe/sort/group bars into days, then
compute one feature row per day whose opening range is complete.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from openrange.data.normalize import normalize_record
from openrange.data.series import build_daily_buckets
from openrange.exceptions import IncompleteOpeningRange
from openrange.features.daily import DailyFeatureCalculator
from openrange.types import DEFAULT_SCHEDULE, Bar, DailyRow, ProcessResult, SessionSchedule

logger = logging.getLogger(__name__)


def process_bars(
    bars: Iterable[Bar],
    schedule: SessionSchedule = DEFAULT_SCHEDULE,
) -> tuple[list[DailyRow], int]:
    """Compute daily rows from normalized bars.

    :param bars: Bars in any order, duplicates allowed.
    :param schedule: Session clock-time buckets.
    :returns: Daily rows in ascending date order and the dropped-day count.
    """
    calculator = DailyFeatureCalculator(schedule)
    rows: list[DailyRow] = []
    dropped = 0
    for date, day_bars in build_daily_buckets(bars, schedule.zone).items():
        try:
            rows.append(calculator.compute(date, day_bars))
        except IncompleteOpeningRange as e:
            logger.info("%s", e)
            dropped += 1
    return rows, dropped


def process_rows(
    records: Iterable[Mapping[str, Any]],
    schedule: SessionSchedule = DEFAULT_SCHEDULE,
) -> ProcessResult:
    """Run the full pipeline over raw field mappings.

    :param records: Raw rows, one mapping per source row.
    :param schedule: Session clock-time buckets.
    :returns: Daily rows plus batch counters.
    """
    bars: list[Bar] = []
    rows_read = 0
    for record in records:
        rows_read += 1
        bar = normalize_record(record, schedule.zone)
        if bar is not None:
            bars.append(bar)

    discarded = rows_read - len(bars)
    if discarded:
        logger.info("Discarded %d of %d rows without a usable timestamp", discarded, rows_read)

    daily_rows, dropped = process_bars(bars, schedule)
    bars_kept = len({bar.timestamp for bar in bars})
    logger.info(
        "Built %d daily rows from %d bars (%d days dropped)",
        len(daily_rows), bars_kept, dropped,
    )
    return ProcessResult(
        daily_rows=daily_rows,
        days_dropped=dropped,
        rows_read=rows_read,
        rows_discarded=discarded,
        bars_kept=bars_kept,
    )


__all__ = ["process_bars", "process_rows"]
