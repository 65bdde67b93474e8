"""Resolution of textual date/time fields into trading-zone instants.

Sources disagree on how they write bar times: ISO strings with or without an
offset, a separate time column, or compact ``YYYYMMDD`` dates. Everything is
anchored to a single trading zone. Wall-clock values without an offset are
taken as already being in that zone; values carrying ``Z`` or ``+HH:MM`` are
converted into it.
"""

from __future__ import annotations

import re
from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

from openrange.exceptions import UnparseableTimestamp

DEFAULT_ZONE = "America/New_York"

# Tried in order once the ISO parse fails.
FALLBACK_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y%m%d %H:%M:%S",
    "%Y%m%d %H:%M",
    "%Y%m%d%H:%M:%S",
    "%Y-%m-%d",
    "%Y%m%d",
)

_WHITESPACE = re.compile(r"\s+")


@lru_cache(maxsize=None)
def get_zone(name: str) -> ZoneInfo:
    """Return a cached ``ZoneInfo`` for ``name``."""
    return ZoneInfo(name)


def _candidates(date_raw: str, time_raw: str | None) -> list[str]:
    cleaned_date = date_raw.strip()
    candidates = []
    if time_raw and time_raw.strip() and "T" not in cleaned_date:
        candidates.append(f"{cleaned_date} {time_raw.strip()}")
    candidates.append(cleaned_date)
    return candidates


def _parse_iso(candidate: str, zone: ZoneInfo) -> datetime | None:
    iso = candidate if "T" in candidate else candidate.replace(" ", "T", 1)
    if iso.endswith(("Z", "z")):
        iso = iso[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(iso)
    except ValueError:
        return None
    if dt.tzinfo is not None:
        return dt.astimezone(zone)
    return dt.replace(tzinfo=zone)


def resolve_timestamp(
    date_raw: str,
    time_raw: str | None = None,
    zone: str = DEFAULT_ZONE,
) -> datetime:
    """Resolve a date (and optional separate time) into a trading-zone instant.

    The combined ``date time`` string is tried before the date alone. For each
    candidate an ISO-8601 parse is attempted first, then each of
    :data:`FALLBACK_FORMATS`. The first successful parse wins.

    :param date_raw: Date, or a combined date-time string.
    :param time_raw: Optional separate time-of-day string.
    :param zone: IANA name of the trading zone.
    :returns: Timezone-aware datetime in ``zone``.
    :raises UnparseableTimestamp: If no candidate matches any layout.
    """
    tz = get_zone(zone)
    for candidate in _candidates(date_raw, time_raw):
        cleaned = _WHITESPACE.sub(" ", candidate).strip()
        if not cleaned:
            continue

        dt = _parse_iso(cleaned, tz)
        if dt is not None:
            return dt

        for fmt in FALLBACK_FORMATS:
            try:
                return datetime.strptime(cleaned, fmt).replace(tzinfo=tz)
            except ValueError:
                continue

    raise UnparseableTimestamp(date_raw, time_raw)


__all__ = ["DEFAULT_ZONE", "FALLBACK_FORMATS", "get_zone", "resolve_timestamp"]
