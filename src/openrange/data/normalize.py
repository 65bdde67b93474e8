"""Conversion of raw field mappings into canonical bars."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Iterator, Mapping

from openrange.data.timestamps import DEFAULT_ZONE, resolve_timestamp
from openrange.exceptions import UnparseableTimestamp
from openrange.types import Bar

logger = logging.getLogger(__name__)


def normalize_keys(record: Mapping[Any, Any]) -> dict[str, str]:
    """Lower-case and trim field names, keeping the last value per name.

    Empty keys and ``None`` values are dropped; non-string values are
    converted with ``str``.
    """
    normalized: dict[str, str] = {}
    for key, value in record.items():
        if key is None or value is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        normalized[name] = value if isinstance(value, str) else str(value)
    return normalized


def parse_number(raw: str | None) -> float:
    """Parse a numeric field, returning NaN for empty or non-numeric input."""
    if raw is None:
        return math.nan
    text = raw.strip()
    if not text:
        return math.nan
    try:
        value = float(text)
    except ValueError:
        return math.nan
    return value if math.isfinite(value) else math.nan


def _optional(value: float) -> float | None:
    return value if math.isfinite(value) else None


def normalize_record(record: Mapping[Any, Any], zone: str = DEFAULT_ZONE) -> Bar | None:
    """Turn one raw row into a :class:`Bar`, or None if it cannot be placed in time.

    :param record: Raw field mapping, keys matched case-insensitively.
    :param zone: IANA name of the trading zone.
    :returns: Normalized bar, or None when the row has no usable timestamp.
    """
    fields = normalize_keys(record)
    date_raw = fields.get("date")
    if not date_raw:
        logger.debug("Dropping row without date: %s", dict(record))
        return None

    time_raw = fields.get("time")
    if time_raw is None:
        time_raw = fields.get("timestamp")

    try:
        timestamp = resolve_timestamp(date_raw, time_raw, zone)
    except UnparseableTimestamp as e:
        logger.debug("Dropping row: %s", e)
        return None

    return Bar(
        timestamp=timestamp,
        open=parse_number(fields.get("open")),
        high=parse_number(fields.get("high")),
        low=parse_number(fields.get("low")),
        close=parse_number(fields.get("close")),
        volume=parse_number(fields.get("volume")),
        bar_count=_optional(parse_number(fields.get("barcount"))),
        average=_optional(parse_number(fields.get("average"))),
    )


def normalize_records(
    records: Iterable[Mapping[Any, Any]],
    zone: str = DEFAULT_ZONE,
) -> Iterator[Bar]:
    """Yield a bar for every raw row that resolves to an instant."""
    for record in records:
        bar = normalize_record(record, zone)
        if bar is not None:
            yield bar


__all__ = [
    "normalize_keys",
    "parse_number",
    "normalize_record",
    "normalize_records",
]
