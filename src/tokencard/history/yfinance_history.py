"""Yahoo Finance price history provider."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pandas as pd

from tokencard.domain.models import Period, PriceSeries
from tokencard.errors import HistoryProviderError
from tokencard.history.base import series_from_frame

PERIOD_INTERVALS: dict[Period, str] = {
    Period.DAY: "5m",
    Period.WEEK: "60m",
    Period.MONTH: "60m",
    Period.QUARTER: "1d",
    Period.YEAR: "1d",
    Period.ALL: "1wk",
}


class YFinanceHistoryProvider:
    """Fetch close-price history from Yahoo Finance via yfinance."""

    def __init__(self, symbols: dict[str, str] | None = None) -> None:
        self.symbols = {key.strip().lower(): value for key, value in (symbols or {}).items()}

    def get_history(self, asset_id: str, period: Period, currency: str) -> PriceSeries:
        try:
            import yfinance as yf
        except ImportError as exc:
            raise HistoryProviderError(
                "yfinance is required for the yfinance data source. Install it with `pip install yfinance`."
            ) from exc

        ticker = self._resolve_ticker(asset_id, currency)
        try:
            history = yf.Ticker(ticker).history(
                **self._window_kwargs(period),
                interval=PERIOD_INTERVALS[period],
                auto_adjust=False,
                actions=False,
            )
        except Exception as exc:
            raise HistoryProviderError(f"yfinance request failed for {asset_id} ({ticker}): {exc}") from exc

        return self._normalize_history(history, asset_id, ticker)

    @staticmethod
    def _normalize_history(history: Any, asset_id: str, ticker: str) -> PriceSeries:
        if history is None:
            return ()
        frame = pd.DataFrame(history).copy()
        if frame.empty:
            return ()
        close_columns = [column for column in frame.columns if str(column).strip().lower() == "close"]
        if not close_columns:
            raise HistoryProviderError(f"yfinance payload missing Close column for {asset_id} ({ticker})")
        closes = pd.DataFrame(
            {"price": pd.to_numeric(frame[close_columns[0]], errors="coerce")},
            index=pd.to_datetime(frame.index, utc=True),
        )
        return series_from_frame(closes)

    @staticmethod
    def _window_kwargs(period: Period, now: datetime | None = None) -> dict[str, Any]:
        if period is Period.ALL:
            return {"period": "max"}
        end = now or datetime.now(tz=UTC)
        start = end - timedelta(seconds=period.duration_seconds)
        return {"start": start, "end": end}

    def _resolve_ticker(self, asset_id: str, currency: str) -> str:
        base = self.symbols.get(asset_id.strip().lower(), asset_id).strip().upper()
        if "-" in base:
            return base
        quote = currency.strip().upper()
        if quote == "USDT":
            quote = "USD"
        return f"{base}-{quote}"
