"""Deduplication, ordering and day-grouping of normalized bars."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from openrange.data.timestamps import DEFAULT_ZONE, get_zone
from openrange.types import Bar

logger = logging.getLogger(__name__)


def _instant(ts: datetime) -> datetime:
    return ts.astimezone(timezone.utc)


def dedupe_and_sort(bars: Iterable[Bar], zone: str = DEFAULT_ZONE) -> list[Bar]:
    """Collapse bars sharing an instant and sort ascending.

    The last bar seen for an instant wins. Each surviving bar is re-expressed
    in the trading zone.

    :param bars: Bars in input order.
    :param zone: IANA name of the trading zone.
    :returns: Unique bars sorted by timestamp.
    """
    tz = get_zone(zone)
    by_instant: dict[datetime, Bar] = {}
    for bar in bars:
        key = _instant(bar.timestamp)
        if key in by_instant:
            logger.debug("Duplicate bar at %s, keeping later row", key.isoformat())
        by_instant[key] = bar.model_copy(update={"timestamp": bar.timestamp.astimezone(tz)})
    return [by_instant[key] for key in sorted(by_instant)]


def group_by_day(bars: Iterable[Bar], zone: str = DEFAULT_ZONE) -> dict[str, list[Bar]]:
    """Partition bars by trading-zone calendar date.

    :param bars: Bars in any order.
    :param zone: IANA name of the trading zone.
    :returns: Mapping of ISO date to that day's bars, dates ascending and each
        day's bars ascending by timestamp.
    """
    tz = get_zone(zone)
    days: dict[str, list[Bar]] = {}
    for bar in bars:
        date_key = bar.timestamp.astimezone(tz).date().isoformat()
        days.setdefault(date_key, []).append(bar)

    return {
        date_key: sorted(days[date_key], key=lambda b: _instant(b.timestamp))
        for date_key in sorted(days)
    }


def build_daily_buckets(bars: Iterable[Bar], zone: str = DEFAULT_ZONE) -> dict[str, list[Bar]]:
    """Deduplicate, sort and group bars into per-day buckets."""
    return group_by_day(dedupe_and_sort(bars, zone), zone)


__all__ = ["dedupe_and_sort", "group_by_day", "build_daily_buckets"]
