"""Core type definitions for the opening-range feature engine.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages. Missing numeric values are carried
as ``float("nan")`` rather than ``None`` so they flow through arithmetic.
"""

from __future__ import annotations

import math
from datetime import datetime, time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Session Types
# ---------------------------------------------------------------------------


def _parse_clock(value: Any) -> time:
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected HH:MM:SS clock string, got {value!r}")
    try:
        return datetime.strptime(value.strip(), "%H:%M:%S").time()
    except ValueError as e:
        raise ValueError(f"Invalid clock time '{value}', expected HH:MM:SS") from e


class SessionSchedule(FrozenModel):
    """Clock-time buckets that define a trading day's feature windows.

    :param zone: IANA name of the exchange-local trading zone.
    :param opening_start: Clock time of the first opening-range bar.
    :param opening_bars: Number of one-minute bars in the opening range.
    :param outcome_start: First clock time of the outcome window (inclusive).
    :param outcome_end: Last clock time of the outcome window (inclusive).
    :param touch_tolerance: Absolute tolerance when matching a bar to an extremum.
    """

    zone: str = "America/New_York"
    opening_start: time = time(9, 30)
    opening_bars: int = Field(default=5, gt=0)
    outcome_start: time = time(9, 35)
    outcome_end: time = time(11, 0)
    touch_tolerance: float = Field(default=1e-8, ge=0.0)

    @field_validator("opening_start", "outcome_start", "outcome_end", mode="before")
    @classmethod
    def _coerce_clock(cls, value: Any) -> time:
        return _parse_clock(value)

    @model_validator(mode="after")
    def _check_windows(self) -> SessionSchedule:
        if self.outcome_start > self.outcome_end:
            raise ValueError("'outcome_start' must not be after 'outcome_end'")
        if self._opening_start_seconds() + 60 * (self.opening_bars - 1) >= 24 * 3600:
            raise ValueError("Opening range must end before midnight")
        return self

    def _opening_start_seconds(self) -> int:
        start = self.opening_start
        return start.hour * 3600 + start.minute * 60 + start.second

    def opening_keys(self) -> list[str]:
        """Clock keys (``HH:MM:SS``) of the mandatory opening-range bars."""
        base = self._opening_start_seconds()
        keys = []
        for i in range(self.opening_bars):
            seconds = base + 60 * i
            keys.append(f"{seconds // 3600:02d}:{seconds % 3600 // 60:02d}:{seconds % 60:02d}")
        return keys

    @property
    def outcome_start_key(self) -> str:
        return self.outcome_start.strftime("%H:%M:%S")

    @property
    def outcome_end_key(self) -> str:
        return self.outcome_end.strftime("%H:%M:%S")


DEFAULT_SCHEDULE = SessionSchedule()


# ---------------------------------------------------------------------------
# Market Data Types
# ---------------------------------------------------------------------------


class Bar(FrozenModel):
    """One-minute bar of market data, normalized into the trading zone.

    :param timestamp: Start of the bar (timezone-aware, trading zone).
    :param open: Opening price, NaN when missing.
    :param high: Highest price during the bar, NaN when missing.
    :param low: Lowest price during the bar, NaN when missing.
    :param close: Closing price, NaN when missing.
    :param volume: Trading volume, NaN when missing.
    :param bar_count: Number of trades in the bar, None if not supplied.
    :param average: Volume-weighted price within the bar, None if not supplied.
    """

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float
    bar_count: float | None = None
    average: float | None = None

    @field_validator("timestamp")
    @classmethod
    def _require_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("Bar timestamp must be timezone-aware")
        return value


class TouchDirection(str, Enum):
    """Which outcome-window extremum was reached first."""

    UP = "up"
    DOWN = "down"


OUTPUT_COLUMNS: tuple[str, ...] = (
    "date",
    "open_day",
    "high_5min",
    "low_5min",
    "close_5min",
    "range_5min",
    "body_5min",
    "pct_change_5min",
    "volume_5min",
    "vwap_5min",
    "high_to_11am",
    "low_to_11am",
    "close_11am",
    "range_to_11am",
    "pct_change_to_11am",
    "pct_move",
    "direction_peak",
    "hit_5min_dir",
    "time_first_touch",
)


class DailyRow(FrozenModel):
    """One trading day's opening-range features and outcome labels.

    Numeric fields are NaN when the inputs needed to compute them are
    missing. ``time_first_touch`` is None when no side wins the first touch.
    """

    date: str
    open_day: float
    high_5min: float
    low_5min: float
    close_5min: float
    range_5min: float
    body_5min: float
    pct_change_5min: float
    volume_5min: float
    vwap_5min: float
    high_to_11am: float
    low_to_11am: float
    close_11am: float
    range_to_11am: float
    pct_change_to_11am: float
    pct_move: float
    direction_peak: int = Field(ge=-1, le=1)
    hit_5min_dir: int = Field(ge=0, le=1)
    time_first_touch: TouchDirection | None = None

    def to_record(self) -> dict[str, Any]:
        """Return the row as a mapping in output column order."""
        return {column: getattr(self, column) for column in OUTPUT_COLUMNS}


# ---------------------------------------------------------------------------
# Result Types
# ---------------------------------------------------------------------------


class ProcessResult(FrozenModel):
    """Output of one batch run of the feature pipeline.

    :param daily_rows: Feature rows in ascending date order.
    :param days_dropped: Days skipped for an incomplete opening range.
    :param rows_read: Raw rows handed to the normalizer.
    :param rows_discarded: Raw rows dropped (no date or unparseable timestamp).
    :param bars_kept: Bars remaining after deduplication.
    """

    daily_rows: list[DailyRow] = Field(default_factory=list)
    days_dropped: int = 0
    rows_read: int = 0
    rows_discarded: int = 0
    bars_kept: int = 0


def _format_metric(value: float, decimals: int) -> str:
    return f"{value:.{decimals}f}" if math.isfinite(value) else "NaN"


class SummaryMetrics(FrozenModel):
    """Dataset-level descriptive statistics over the produced rows.

    :param days_processed: Number of daily rows produced.
    :param days_dropped_first5_incomplete: Days dropped for a missing opening bar.
    :param pct_missing_close_11am: Percentage of rows without a cutoff close.
    :param mean_pct_change_5min: Mean opening-range change over finite values.
    :param median_pct_change_5min: Median opening-range change over finite values.
    :param mean_pct_move: Mean peak excursion over finite values.
    :param median_pct_move: Median peak excursion over finite values.
    :param hit_rate_5min_dir: Fraction of directional days the opening range called.
    """

    days_processed: int
    days_dropped_first5_incomplete: int
    pct_missing_close_11am: float
    mean_pct_change_5min: float
    median_pct_change_5min: float
    mean_pct_move: float
    median_pct_move: float
    hit_rate_5min_dir: float

    def as_table(self) -> list[tuple[str, str]]:
        """Return ``(metric, value)`` pairs formatted for reporting."""
        return [
            ("days_processed", str(self.days_processed)),
            ("days_dropped_first5_incomplete", str(self.days_dropped_first5_incomplete)),
            ("pct_missing_close_11am", _format_metric(self.pct_missing_close_11am, 2)),
            ("mean_pct_change_5min", _format_metric(self.mean_pct_change_5min, 6)),
            ("median_pct_change_5min", _format_metric(self.median_pct_change_5min, 6)),
            ("mean_pct_move", _format_metric(self.mean_pct_move, 6)),
            ("median_pct_move", _format_metric(self.median_pct_move, 6)),
            ("hit_rate_5min_dir", _format_metric(self.hit_rate_5min_dir, 4)),
        ]


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class BuildFeaturesConfig(FrozenModel):
    """Configuration for a build-features run.

    :param input_path: Location of the raw bar data.
    :param output_path: Destination CSV, or None to skip writing.
    :param data_source: Source type ("csv" or "yahoo").
    :param source_params: Source-specific parameters.
    :param schedule: Session clock-time buckets.
    :param log_level: Logging level.
    """

    input_path: str
    output_path: str | None = None
    data_source: str = "csv"
    source_params: dict[str, Any] = Field(default_factory=dict)
    schedule: SessionSchedule = Field(default_factory=SessionSchedule)
    log_level: str = "WARNING"


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

__all__ = [
    # Base models
    "FrozenModel",
    # Session
    "SessionSchedule",
    "DEFAULT_SCHEDULE",
    # Market data
    "Bar",
    "TouchDirection",
    "OUTPUT_COLUMNS",
    "DailyRow",
    # Results
    "ProcessResult",
    "SummaryMetrics",
    # Configuration
    "BuildFeaturesConfig",
]
