"""Core token card domain models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, NamedTuple

DEFAULT_PRICE_CURRENCY = "USD"
NO_SELECTION = -1


class Period(StrEnum):
    """Selectable price history windows."""

    DAY = "1D"
    WEEK = "7D"
    MONTH = "1M"
    QUARTER = "3M"
    YEAR = "1Y"
    ALL = "ALL"

    @property
    def duration_seconds(self) -> float:
        return _PERIOD_SECONDS[self]

    @property
    def label(self) -> str:
        return "All" if self is Period.ALL else self.value

    @classmethod
    def parse(cls, value: str) -> Period:
        """Resolve a period code case-insensitively."""
        candidate = value.strip().upper()
        if candidate == "1W":
            candidate = "7D"
        for period in cls:
            if period.value == candidate:
                return period
        supported = ", ".join(period.value for period in cls)
        raise ValueError(f"Unknown period '{value}'. Supported: {supported}")

    @classmethod
    def ordered(cls) -> list[Period]:
        return sorted(cls, key=lambda period: period.duration_seconds)


_PERIOD_SECONDS: dict[Period, float] = {
    Period.DAY: 86_400.0,
    Period.WEEK: 7 * 86_400.0,
    Period.MONTH: 30 * 86_400.0,
    Period.QUARTER: 90 * 86_400.0,
    Period.YEAR: 365 * 86_400.0,
    Period.ALL: math.inf,
}

DEFAULT_PERIOD = Period.DAY


class ChangeSign(StrEnum):
    """Direction of the price change indicator."""

    UP = "up"
    DOWN = "down"
    FLAT = "flat"

    @property
    def arrow(self) -> str:
        return {"up": "↑", "down": "↓", "flat": ""}[self.value]


class ChartState(StrEnum):
    """Presence of history data for the active series."""

    LOADING = "loading"
    EMPTY = "empty"
    READY = "ready"


class PricePoint(NamedTuple):
    """Single `(unix seconds, price)` sample."""

    timestamp: int
    price: float


PriceSeries = tuple[PricePoint, ...]


def make_series(points: Any) -> PriceSeries:
    """Build a price series from `(timestamp, price)` pairs.

    Raises ValueError when timestamps go backwards.
    """
    series = tuple(PricePoint(int(ts), float(price)) for ts, price in points)
    for previous, current in zip(series, series[1:]):
        if current.timestamp < previous.timestamp:
            raise ValueError(
                f"price series must be non-decreasing in time "
                f"({current.timestamp} after {previous.timestamp})"
            )
    return series


@dataclass(frozen=True)
class Asset:
    """Wallet token identity and live props supplied by the host."""

    asset_id: str
    symbol: str
    decimals: int = 9
    price: float = 0.0
    price_currency: str = DEFAULT_PRICE_CURRENCY
    amount: int = 0
    name: str = ""
    price_usd: float = 0.0
    cmc_slug: str | None = None

    @property
    def balance(self) -> float:
        """Raw integer amount scaled by the token decimals."""
        return self.amount / (10**self.decimals)


@dataclass(frozen=True)
class SeriesKey:
    """Store address of one price series."""

    asset_id: str
    period: Period
    currency: str

    def describe(self) -> str:
        return f"{self.asset_id}/{self.period.value}/{self.currency}"


@dataclass(frozen=True)
class ViewSnapshot:
    """Render-ready state of the token card."""

    asset_id: str
    period: Period
    currency: str
    currency_symbol: str
    display_price: float
    price_precision: int
    display_date: str
    change_absolute: float
    change_percent: float
    change_sign: ChangeSign
    is_stale: bool
    is_loading: bool
    selected_index: int | None = None
    display_timestamp: int | None = None
    holding_value: float = 0.0
    chart_state: ChartState = ChartState.LOADING
    history_start_price: float | None = None
    history_start_date: str | None = None
    period_label: str = ""
    show_period_switcher: bool = True
    show_change: bool = False
    cmc_url: str | None = None

    def to_record(self) -> dict[str, Any]:
        """Convert snapshot to serializable dict."""
        return {
            "asset_id": self.asset_id,
            "period": self.period.value,
            "currency": self.currency,
            "currency_symbol": self.currency_symbol,
            "display_price": self.display_price,
            "price_precision": self.price_precision,
            "display_date": self.display_date,
            "display_timestamp": self.display_timestamp,
            "change_absolute": self.change_absolute,
            "change_percent": self.change_percent,
            "change_sign": self.change_sign.value,
            "is_stale": self.is_stale,
            "is_loading": self.is_loading,
            "selected_index": self.selected_index,
            "holding_value": self.holding_value,
            "chart_state": self.chart_state.value,
            "history_start_price": self.history_start_price,
            "history_start_date": self.history_start_date,
            "period_label": self.period_label,
            "show_period_switcher": self.show_period_switcher,
            "show_change": self.show_change,
            "cmc_url": self.cmc_url,
        }
