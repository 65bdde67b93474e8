"""Built-in sample day for the demo command.

The sample is one session (2024-01-02) with the five opening bars and a
handful of outcome-window bars. It opens at 100, rallies to 103.5 by 09:50
and sells off to 98.5 at 11:00, so the peak excursion is upward and printed
first.
"""

from __future__ import annotations

from openrange.data.sources import MemoryRowSource
from openrange.features.summary import summarize
from openrange.output import format_daily_rows, format_summary
from openrange.pipeline import process_rows

DEMO_HEADER = ("date", "time", "open", "high", "low", "close", "volume", "barCount", "average")

DEMO_BARS = (
    ("2024-01-02", "09:30:00", "100", "100.5", "99.5", "100.3", "1500", "300", "100.1"),
    ("2024-01-02", "09:31:00", "100.3", "101", "100", "100.8", "1200", "240", "100.6"),
    ("2024-01-02", "09:32:00", "100.8", "101.2", "100.5", "101", "1100", "220", "100.9"),
    ("2024-01-02", "09:33:00", "101", "101.4", "100.7", "101.2", "1300", "260", "101.1"),
    ("2024-01-02", "09:34:00", "101.2", "101.5", "100.8", "100.9", "1600", "320", "101.2"),
    ("2024-01-02", "09:35:00", "100.9", "102", "100.7", "101.5", "1400", "280", "101.3"),
    ("2024-01-02", "09:40:00", "101.5", "103", "100.5", "102.8", "1300", "260", "102.1"),
    ("2024-01-02", "09:50:00", "102.8", "103.5", "100.2", "101.2", "1500", "300", "101.6"),
    ("2024-01-02", "10:10:00", "101.2", "102", "99.5", "100.1", "1600", "320", "100.5"),
    ("2024-01-02", "10:30:00", "100.1", "100.8", "99.2", "99.7", "1700", "340", "99.9"),
    ("2024-01-02", "10:50:00", "99.7", "100", "98.8", "99.2", "1800", "360", "99.3"),
    ("2024-01-02", "11:00:00", "99.2", "99.8", "98.5", "99", "1900", "380", "99.1"),
)


def demo_rows() -> list[dict[str, str]]:
    """The sample bars as raw field mappings."""
    return [dict(zip(DEMO_HEADER, values)) for values in DEMO_BARS]


def run_demo() -> str:
    """Run the pipeline over the sample day and render the report.

    :returns: Daily CSV followed by the summary table, or only the summary
        when no day qualifies.
    """
    result = process_rows(MemoryRowSource(demo_rows()).fetch_rows())
    summary = format_summary(summarize(result.daily_rows, result.days_dropped))
    if not result.daily_rows:
        return summary
    return f"{format_daily_rows(result.daily_rows).strip()}\n{summary}"


__all__ = ["DEMO_BARS", "demo_rows", "run_demo"]
