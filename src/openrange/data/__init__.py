"""Raw row sources, bar normalization and series building."""

from openrange.data.normalize import normalize_record, normalize_records
from openrange.data.series import build_daily_buckets, dedupe_and_sort, group_by_day
from openrange.data.sources import (CSVRowSource, MemoryRowSource, RowSource,
                                    YahooRowSource, resolve_row_source)
from openrange.data.timestamps import resolve_timestamp

__all__ = [
    "RowSource",
    "MemoryRowSource",
    "CSVRowSource",
    "YahooRowSource",
    "resolve_row_source",
    "resolve_timestamp",
    "normalize_record",
    "normalize_records",
    "dedupe_and_sort",
    "group_by_day",
    "build_daily_buckets",
]
