"""In-memory price history store keyed by asset, period and currency."""

from __future__ import annotations

from tokencard.domain.models import Period, PriceSeries, SeriesKey


class PriceHistoryStore:
    """Last-write-wins mapping of fetched price series.

    A key that was never written is absent (`None`), which is distinct from
    a stored empty series.
    """

    def __init__(self) -> None:
        self._series: dict[SeriesKey, PriceSeries] = {}

    def get(self, asset_id: str, period: Period, currency: str) -> PriceSeries | None:
        return self._series.get(SeriesKey(asset_id, period, currency))

    def put(self, asset_id: str, period: Period, currency: str, series: PriceSeries) -> None:
        self._series[SeriesKey(asset_id, period, currency)] = tuple(series)

    def get_key(self, key: SeriesKey) -> PriceSeries | None:
        return self._series.get(key)

    def put_key(self, key: SeriesKey, series: PriceSeries) -> None:
        self._series[key] = tuple(series)

    def periods_for(self, asset_id: str, currency: str) -> dict[Period, PriceSeries]:
        """Return every stored series for one asset and currency."""
        return {
            key.period: series
            for key, series in self._series.items()
            if key.asset_id == asset_id and key.currency == currency
        }

    def clear(self) -> None:
        self._series.clear()

    def __len__(self) -> int:
        return len(self._series)
