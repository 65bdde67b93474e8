"""Daily feature derivation and dataset summaries."""

from openrange.features.daily import DailyFeatureCalculator, first_touch, vwap
from openrange.features.summary import summarize

__all__ = [
    "DailyFeatureCalculator",
    "first_touch",
    "vwap",
    "summarize",
]
