"""Price history store, service and provider implementations."""

from .base import PriceHistoryProvider, series_from_frame, series_from_pairs
from .csv_history import CsvHistoryProvider
from .http_history import HttpHistoryProvider
from .service import HistoryService
from .store import PriceHistoryStore
from .yfinance_history import YFinanceHistoryProvider

__all__ = [
    "PriceHistoryProvider",
    "PriceHistoryStore",
    "HistoryService",
    "CsvHistoryProvider",
    "HttpHistoryProvider",
    "YFinanceHistoryProvider",
    "series_from_frame",
    "series_from_pairs",
]
