"""Domain models and event types."""

from .events import CardEvent
from .models import (
    DEFAULT_PERIOD,
    DEFAULT_PRICE_CURRENCY,
    NO_SELECTION,
    Asset,
    ChangeSign,
    ChartState,
    Period,
    PricePoint,
    PriceSeries,
    SeriesKey,
    ViewSnapshot,
    make_series,
)

__all__ = [
    "DEFAULT_PERIOD",
    "DEFAULT_PRICE_CURRENCY",
    "NO_SELECTION",
    "Asset",
    "CardEvent",
    "ChangeSign",
    "ChartState",
    "Period",
    "PricePoint",
    "PriceSeries",
    "SeriesKey",
    "ViewSnapshot",
    "make_series",
]
