"""Per-day opening-range features and outcome labels.

For each trading day the calculator reads three things off the day's bars:

- the opening range: the mandatory one-minute bars starting at the session
  open (09:30-09:34 by default),
- the outcome window: every bar between 09:35 and 11:00 inclusive,
- the labels derived from both: which side of the open moved further
  (``direction_peak``), whether the opening range already pointed that way
  (``hit_5min_dir``), and which outcome extremum printed first
  (``time_first_touch``).
"""

from __future__ import annotations

from datetime import datetime

from openrange.data.timestamps import get_zone
from openrange.exceptions import IncompleteOpeningRange
from openrange.features.numeric import NAN, div, extremum, is_finite, sign, sub
from openrange.types import DEFAULT_SCHEDULE, Bar, DailyRow, SessionSchedule, TouchDirection


def typical_price(bar: Bar) -> float:
    """(high + low + close) / 3, NaN if any of the three is missing."""
    if is_finite(bar.high) and is_finite(bar.low) and is_finite(bar.close):
        return (bar.high + bar.low + bar.close) / 3
    return NAN


def vwap(bars: list[Bar]) -> float:
    """Volume-weighted average price over ``bars``.

    Uses each bar's own ``average`` when supplied, else its typical price.
    Bars without positive volume or without a usable price are skipped.
    """
    numerator = 0.0
    denominator = 0.0
    for bar in bars:
        if not is_finite(bar.volume) or bar.volume <= 0:
            continue
        price = bar.average if is_finite(bar.average) else typical_price(bar)
        if not is_finite(price):
            continue
        numerator += price * bar.volume
        denominator += bar.volume
    return numerator / denominator if denominator > 0 else NAN


def first_touch(bars: list[Bar], high_target: float, low_target: float,
                tolerance: float = 1e-8) -> TouchDirection | None:
    """Which of the two targets the bars reach first.

    Bars must be in ascending time order. Returns None unless both sides are
    touched and one of them strictly earlier than the other.
    """
    if not is_finite(high_target) and not is_finite(low_target):
        return None

    up_at: datetime | None = None
    down_at: datetime | None = None
    for bar in bars:
        if up_at is None and is_finite(high_target) and is_finite(bar.high):
            if bar.high >= high_target - tolerance:
                up_at = bar.timestamp
        if down_at is None and is_finite(low_target) and is_finite(bar.low):
            if bar.low <= low_target + tolerance:
                down_at = bar.timestamp
        if up_at is not None and down_at is not None:
            break

    if up_at is None or down_at is None:
        return None
    if up_at < down_at:
        return TouchDirection.UP
    if down_at < up_at:
        return TouchDirection.DOWN
    return None


class DailyFeatureCalculator:
    """Builds one :class:`DailyRow` from a day's ascending bars.

    :param schedule: Clock-time buckets and touch tolerance.
    """

    def __init__(self, schedule: SessionSchedule = DEFAULT_SCHEDULE) -> None:
        self.schedule = schedule
        self._zone = get_zone(schedule.zone)
        self._opening_keys = schedule.opening_keys()

    def clock_key(self, bar: Bar) -> str:
        """Trading-zone wall-clock time of ``bar`` as ``HH:MM:SS``."""
        return bar.timestamp.astimezone(self._zone).strftime("%H:%M:%S")

    def index_by_clock(self, bars: list[Bar]) -> dict[str, Bar]:
        """Map each bar's clock key to the bar; later bars win on collision."""
        return {self.clock_key(bar): bar for bar in bars}

    def opening_bars(self, date: str, by_clock: dict[str, Bar]) -> list[Bar]:
        """The opening-range bars in clock order.

        :raises IncompleteOpeningRange: If any opening minute has no bar.
        """
        missing = [key for key in self._opening_keys if key not in by_clock]
        if missing:
            raise IncompleteOpeningRange(date, missing)
        return [by_clock[key] for key in self._opening_keys]

    def outcome_bars(self, bars: list[Bar]) -> list[Bar]:
        """Bars whose clock time falls inside the outcome window."""
        start = self.schedule.outcome_start_key
        end = self.schedule.outcome_end_key
        return [bar for bar in bars if start <= self.clock_key(bar) <= end]

    def compute(self, date: str, bars: list[Bar]) -> DailyRow:
        """Compute the feature row for one day.

        :param date: ISO date of the day.
        :param bars: The day's bars, ascending by timestamp.
        :returns: Feature row for the day.
        :raises IncompleteOpeningRange: If the opening range is not complete.
        """
        by_clock = self.index_by_clock(bars)
        opening = self.opening_bars(date, by_clock)

        open_day = opening[0].open
        close_5 = opening[-1].close
        high_5 = extremum((b.high for b in opening), maximum=True)
        low_5 = extremum((b.low for b in opening), maximum=False)
        body_5 = sub(close_5, open_day)
        pct_change_5 = div(body_5, open_day)
        volume_5 = sum(b.volume for b in opening if is_finite(b.volume))

        outcome = self.outcome_bars(bars)
        high_11 = extremum((b.high for b in outcome), maximum=True)
        low_11 = extremum((b.low for b in outcome), maximum=False)
        cutoff_bar = by_clock.get(self.schedule.outcome_end_key)
        close_11 = cutoff_bar.close if cutoff_bar is not None else NAN

        up_excursion = div(sub(high_11, open_day), open_day)
        down_excursion = div(sub(open_day, low_11), open_day)
        pct_move = NAN
        if is_finite(up_excursion) and is_finite(down_excursion):
            pct_move = up_excursion if up_excursion >= down_excursion else -down_excursion

        # 0 covers both a flat day and a day without enough data.
        direction_peak = sign(pct_move)
        hit = 0
        if direction_peak != 0 and is_finite(pct_change_5):
            hit = 1 if sign(pct_change_5) == direction_peak else 0

        return DailyRow(
            date=date,
            open_day=open_day,
            high_5min=high_5,
            low_5min=low_5,
            close_5min=close_5,
            range_5min=sub(high_5, low_5),
            body_5min=body_5,
            pct_change_5min=pct_change_5,
            volume_5min=volume_5,
            vwap_5min=vwap(opening),
            high_to_11am=high_11,
            low_to_11am=low_11,
            close_11am=close_11,
            range_to_11am=sub(high_11, low_11),
            pct_change_to_11am=div(sub(close_11, open_day), open_day),
            pct_move=pct_move,
            direction_peak=direction_peak,
            hit_5min_dir=hit,
            time_first_touch=first_touch(
                outcome, high_11, low_11, self.schedule.touch_tolerance
            ),
        )


__all__ = ["typical_price", "vwap", "first_touch", "DailyFeatureCalculator"]
