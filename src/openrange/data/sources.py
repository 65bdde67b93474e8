"""Row sources that hand raw bar records to the normalizer.

A source yields one mapping of field name to text per input row. Field names
and values are passed through untouched apart from whitespace trimming; all
interpretation happens in :mod:`openrange.data.normalize`.
"""

from __future__ import annotations

import csv
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping

from openrange.exceptions import DataSourceError

if TYPE_CHECKING:
    from openrange.types import BuildFeaturesConfig


class RowSource(ABC):
    """Abstract base class for raw row sources.

    All source implementations must inherit from this class and implement
    the `fetch_rows` method.
    """

    @abstractmethod
    def fetch_rows(self) -> Iterator[dict[str, str]]:
        """Yield raw field mappings, one per source row.

        :returns: Iterator of raw rows in source order.
        :raises DataSourceError: If reading fails.
        """
        ...


class MemoryRowSource(RowSource):
    """Source over rows already held in memory.

    :param rows: Raw field mappings.
    """

    def __init__(self, rows: Iterable[Mapping[str, Any]]) -> None:
        self.rows = [dict(row) for row in rows]

    def fetch_rows(self) -> Iterator[dict[str, str]]:
        for row in self.rows:
            yield {
                key: value if isinstance(value, str) else str(value)
                for key, value in row.items()
                if value is not None
            }


class CSVRowSource(RowSource):
    """Source that reads raw rows from a header CSV file.

    Expected CSV format: a header row naming some of ``date``, ``time`` or
    ``timestamp``, ``open``, ``high``, ``low``, ``close``, ``volume``,
    ``barCount`` and ``average`` (any case). Other columns are carried along
    and ignored downstream.

    :param source_params: Required parameters:
        - file_path: Path to the CSV file.
        Optional parameters:
        - delimiter: CSV delimiter (default: ",")
        - encoding: File encoding (default: "utf-8-sig", which strips a BOM)
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize CSV row source.

        :param source_params: Configuration with file_path and optional settings.
        :raises DataSourceError: If file_path is not provided.
        """
        self.params = source_params or {}
        self.file_path = self.params.get("file_path")
        if not self.file_path:
            raise DataSourceError("CSVRowSource requires 'file_path' in source_params")
        self.delimiter = self.params.get("delimiter", ",")
        self.encoding = self.params.get("encoding", "utf-8-sig")

    def fetch_rows(self) -> Iterator[dict[str, str]]:
        """Read rows from the CSV file, skipping blank lines.

        :returns: Iterator of raw rows with trimmed keys and values.
        :raises DataSourceError: If the file is missing or malformed.
        """
        path = Path(self.file_path)
        if not path.exists():
            raise DataSourceError(f"CSV file not found: {self.file_path}")

        try:
            with open(path, newline="", encoding=self.encoding) as f:
                reader = csv.DictReader(f, delimiter=self.delimiter)
                for row in reader:
                    cleaned = {
                        key.strip(): value.strip()
                        for key, value in row.items()
                        if key is not None and isinstance(value, str)
                    }
                    if not any(cleaned.values()):
                        continue
                    yield cleaned
        except csv.Error as e:
            raise DataSourceError(f"CSV parsing error: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise DataSourceError(f"Failed to read CSV file: {e}") from e


class YahooRowSource(RowSource):
    """Source that fetches one-minute history from Yahoo Finance via yfinance.

    Each bar becomes a row whose ``date`` is the ISO timestamp with offset, so
    the normalizer converts it into the trading zone.

    :param source_params: Required parameters:
        - symbol: Ticker to fetch.
        Optional parameters:
        - period: yfinance period string (default: "5d")
        - start, end: Explicit YYYY-MM-DD bounds, used instead of period
        - timeout: Request timeout in seconds (default: 30)
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        self.params = source_params or {}
        self.symbol = self.params.get("symbol")
        if not self.symbol:
            raise DataSourceError("YahooRowSource requires 'symbol' in source_params")
        self.period = self.params.get("period", "5d")
        self.start = self.params.get("start")
        self.end = self.params.get("end")
        self.timeout = self.params.get("timeout", 30)

    def fetch_rows(self) -> Iterator[dict[str, str]]:
        """Fetch one-minute bars and yield them as raw rows.

        :raises DataSourceError: If yfinance is missing or the request fails.
        """
        try:
            import yfinance as yf
        except ImportError as e:
            raise DataSourceError(
                "yfinance is not installed. Install it with: pip install yfinance"
            ) from e

        kwargs: dict[str, Any] = {"interval": "1m", "timeout": self.timeout}
        if self.start and self.end:
            kwargs.update(start=self.start, end=self.end)
        else:
            kwargs["period"] = self.period

        try:
            df = yf.Ticker(str(self.symbol)).history(**kwargs)
        except Exception as e:
            raise DataSourceError(
                f"Failed to fetch data for symbol '{self.symbol}': {e}"
            ) from e

        if df.empty:
            return

        for timestamp, row in df.iterrows():
            yield {
                "date": timestamp.isoformat(),
                "open": str(row["Open"]),
                "high": str(row["High"]),
                "low": str(row["Low"]),
                "close": str(row["Close"]),
                "volume": str(row["Volume"]),
            }


def resolve_row_source(config: BuildFeaturesConfig) -> RowSource:
    """Construct a row source from configuration.

    For the CSV source, ``input_path`` is used as ``file_path`` unless
    ``source_params`` names one explicitly.

    :param config: BuildFeaturesConfig with data_source and source_params.
    :returns: RowSource instance for the specified type.
    :raises DataSourceError: If data_source type is unrecognized.
    """
    source_type = config.data_source.lower()

    if source_type == "csv":
        params = {"file_path": config.input_path, **config.source_params}
        return CSVRowSource(params)
    elif source_type == "yahoo":
        params = {"symbol": config.input_path, **config.source_params}
        return YahooRowSource(params)
    else:
        raise DataSourceError(
            f"Unrecognized data source type: '{config.data_source}'. "
            f"Supported types: csv, yahoo"
        )


__all__ = [
    "RowSource",
    "MemoryRowSource",
    "CSVRowSource",
    "YahooRowSource",
    "resolve_row_source",
]
