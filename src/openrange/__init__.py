"""Opening-range feature engine package root."""

from openrange.exceptions import OpenRangeError
from openrange.pipeline import process_bars, process_rows

__all__ = ["OpenRangeError", "process_bars", "process_rows"]
