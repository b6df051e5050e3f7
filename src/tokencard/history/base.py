"""Price history provider contract and shared frame normalization."""

from __future__ import annotations

from typing import Any, Protocol

import pandas as pd

from tokencard.domain.models import Period, PricePoint, PriceSeries


class PriceHistoryProvider(Protocol):
    """Interface for blocking price history retrieval."""

    def get_history(self, asset_id: str, period: Period, currency: str) -> PriceSeries:
        """Return `(unix seconds, price)` points ordered by time."""


TIME_COLUMN_CANDIDATES = ("timestamp", "time", "date", "datetime", "t")
PRICE_COLUMN_CANDIDATES = ("price", "close", "c", "value")


def series_from_frame(frame: pd.DataFrame) -> PriceSeries:
    """Convert a two-column or datetime-indexed frame into a price series.

    Rows with unparseable times or prices are dropped and the result is
    sorted by time.
    """
    if frame is None or frame.empty:
        return ()
    lower_to_original = {str(column).strip().lower(): column for column in frame.columns}
    price_column = _pick(lower_to_original, PRICE_COLUMN_CANDIDATES)
    if price_column is None:
        raise ValueError("history payload has no price column")

    time_column = _pick(lower_to_original, TIME_COLUMN_CANDIDATES)
    if time_column is not None:
        times = frame[time_column]
    elif isinstance(frame.index, pd.DatetimeIndex):
        times = frame.index.to_series(index=frame.index)
    else:
        raise ValueError("history payload has no time column")

    normalized = pd.DataFrame(
        {
            "timestamp": _to_unix_seconds(times).to_numpy(),
            "price": pd.to_numeric(frame[price_column], errors="coerce").to_numpy(),
        }
    )
    normalized = normalized.dropna().sort_values("timestamp", kind="stable")
    return tuple(
        PricePoint(int(row.timestamp), float(row.price))
        for row in normalized.itertuples(index=False)
    )


def series_from_pairs(rows: list[Any]) -> PriceSeries:
    """Normalize a JSON-style `[[ts, price], ...]` payload."""
    if not rows:
        return ()
    frame = pd.DataFrame([list(row)[:2] for row in rows], columns=["timestamp", "price"])
    return series_from_frame(frame)


def _pick(lower_to_original: dict[str, Any], candidates: tuple[str, ...]) -> Any | None:
    for candidate in candidates:
        if candidate in lower_to_original:
            return lower_to_original[candidate]
    return None


def _to_unix_seconds(values: pd.Series) -> pd.Series:
    if pd.api.types.is_numeric_dtype(values):
        numeric = pd.to_numeric(values, errors="coerce")
        # Millisecond epochs are common in wallet APIs.
        return numeric.where(numeric < 1e11, numeric / 1000.0)
    parsed = pd.to_datetime(values, utc=True, errors="coerce")
    seconds = (parsed - pd.Timestamp("1970-01-01", tz="UTC")) // pd.Timedelta(seconds=1)
    return seconds.astype("float64")
