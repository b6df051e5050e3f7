"""Async adapter around blocking history providers."""

from __future__ import annotations

import asyncio

from tokencard.domain.models import Period, PriceSeries, make_series
from tokencard.history.base import PriceHistoryProvider


class HistoryService:
    """Expose `request_price_history` on the event loop.

    Providers block on I/O, so each request runs in a worker thread and the
    loop only suspends at this boundary.
    """

    def __init__(self, provider: PriceHistoryProvider) -> None:
        self.provider = provider

    async def request_price_history(self, asset_id: str, period: Period, currency: str) -> PriceSeries:
        series = await asyncio.to_thread(self.provider.get_history, asset_id, period, currency)
        return make_series(series)
