"""Token card view coordination."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import replace
from enum import StrEnum
from typing import Any

from tokencard.domain.models import (
    DEFAULT_PERIOD,
    Asset,
    Period,
    PriceSeries,
    SeriesKey,
    ViewSnapshot,
)
from tokencard.engine.metrics import derive_snapshot, resolve_chart_currency
from tokencard.engine.scheduler import RefreshScheduler
from tokencard.engine.selection import SelectionState
from tokencard.engine.staleness import OFFLINE_TIMEOUT_SECONDS
from tokencard.history.store import PriceHistoryStore
from tokencard.logging.logger import CardLogger

SnapshotListener = Callable[[ViewSnapshot], None]
EventListener = Callable[[str, dict[str, Any]], None]

DEFAULT_BASE_CURRENCIES = ("USD", "EUR", "RUB", "CNY", "BTC", "TON")


class CoordinatorState(StrEnum):
    """Lifecycle of one card view."""

    UNINITIALIZED = "uninitialized"
    LOADED = "loaded"
    SELECTING_POINT = "selecting_point"
    CLOSED = "closed"


class ViewCoordinator:
    """Wire period, currency and scrub events into one snapshot stream.

    Only the asset, period, base currency, selection and the store are
    authoritative; every snapshot is re-derived from them. A snapshot is
    published to listeners only when it differs from the last one.
    """

    def __init__(
        self,
        asset: Asset,
        store: PriceHistoryStore,
        scheduler: RefreshScheduler,
        period: Period = DEFAULT_PERIOD,
        base_currency: str | None = None,
        offline_timeout: float = OFFLINE_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.time,
        human_logger: CardLogger | None = None,
        base_currencies: tuple[str, ...] = DEFAULT_BASE_CURRENCIES,
    ) -> None:
        self.asset = asset
        self.store = store
        self.scheduler = scheduler
        self.period = period
        self.base_currency = base_currency
        self.offline_timeout = offline_timeout
        self.clock = clock
        self.human_logger = human_logger
        self.base_currencies = base_currencies
        self.state = CoordinatorState.UNINITIALIZED
        self.selection = SelectionState()
        self.selection.bind(self.current_key)
        self._snapshot_listeners: list[SnapshotListener] = []
        self._event_listeners: list[EventListener] = []
        self._last_snapshot: ViewSnapshot | None = None
        scheduler.on_stored = self._on_series_stored
        scheduler.on_tick = self.tick

    @property
    def chart_currency(self) -> str:
        return resolve_chart_currency(self.asset, self.base_currency)

    @property
    def current_key(self) -> SeriesKey:
        return SeriesKey(self.asset.asset_id, self.period, self.chart_currency)

    @property
    def active_series(self) -> PriceSeries | None:
        return self.store.get_key(self.current_key)

    @property
    def last_snapshot(self) -> ViewSnapshot | None:
        return self._last_snapshot

    def subscribe(self, listener: SnapshotListener) -> None:
        self._snapshot_listeners.append(listener)

    def subscribe_events(self, listener: EventListener) -> None:
        self._event_listeners.append(listener)

    def snapshot(self) -> ViewSnapshot:
        """Derive the current snapshot without publishing it."""
        return derive_snapshot(
            asset=self.asset,
            series=self.active_series,
            selected_index=self.selection.index,
            period=self.period,
            currency=self.chart_currency,
            now=self.clock(),
            timeout=self.offline_timeout,
        )

    def start(self) -> ViewSnapshot:
        """Enter LOADED, start ticking and request the first series."""
        if self.state is not CoordinatorState.UNINITIALIZED:
            return self.snapshot()
        self.state = CoordinatorState.LOADED
        self.scheduler.start(lambda: self.current_key)
        self.scheduler.refresh_now(reason="start")
        return self._publish()

    def switch_period(self, period: Period | str) -> ViewSnapshot:
        if isinstance(period, str):
            period = Period.parse(period)
        if self.state is CoordinatorState.CLOSED:
            return self.snapshot()
        self.period = period
        if self.human_logger is not None:
            self.human_logger.switched("period", period.value)
        return self._reset_series()

    def switch_currency(self, currency: str | None) -> ViewSnapshot:
        if self.state is CoordinatorState.CLOSED:
            return self.snapshot()
        self.base_currency = currency.strip().upper() if currency else None
        if self.human_logger is not None:
            self.human_logger.switched("currency", self.chart_currency)
        return self._reset_series()

    def update_asset(self, asset: Asset) -> ViewSnapshot:
        """Apply new live props; a different asset or price currency starts a new series."""
        if self.state is CoordinatorState.CLOSED:
            return self.snapshot()
        previous_key = self.current_key
        self.asset = asset
        if self.current_key != previous_key:
            return self._reset_series()
        return self._publish()

    def update_live_price(self, price: float, price_usd: float | None = None) -> ViewSnapshot:
        changes: dict[str, float] = {"price": price}
        if price_usd is not None:
            changes["price_usd"] = price_usd
        return self.update_asset(replace(self.asset, **changes))

    def scrub(self, index: int) -> ViewSnapshot:
        """Select a chart point; out-of-range indices are ignored."""
        if self.state is CoordinatorState.CLOSED:
            return self.snapshot()
        accepted = self.selection.select(index, self.active_series)
        if self.human_logger is not None:
            self.human_logger.selection(index, accepted)
        if accepted and self.state is not CoordinatorState.UNINITIALIZED:
            self.state = CoordinatorState.SELECTING_POINT
        return self._publish()

    def unscrub(self) -> ViewSnapshot:
        if self.state is CoordinatorState.CLOSED:
            return self.snapshot()
        if self.selection.clear() and self.human_logger is not None:
            self.human_logger.selection(None)
        if self.state is CoordinatorState.SELECTING_POINT:
            self.state = CoordinatorState.LOADED
        return self._publish()

    def tick(self) -> ViewSnapshot:
        """Re-derive on the timer so staleness is re-checked against the clock."""
        if self.state is CoordinatorState.CLOSED:
            return self.snapshot()
        return self._publish()

    def open_currency_menu(self) -> None:
        if self.state is CoordinatorState.CLOSED:
            return
        choices = [code for code in self.base_currencies if code != self.asset.symbol.upper()]
        self._emit_event(
            "currency_menu_requested",
            {
                "choices": choices,
                "excluded": self.asset.symbol.upper(),
                "current": self.chart_currency,
            },
        )

    def open_period_menu(self) -> None:
        if self.state is CoordinatorState.CLOSED:
            return
        self._emit_event(
            "period_menu_requested",
            {
                "choices": [period.value for period in Period.ordered()],
                "current": self.period.value,
            },
        )

    async def close(self) -> None:
        """Tear down: stop ticking and detach from late fetch completions."""
        if self.state is CoordinatorState.CLOSED:
            return
        self.state = CoordinatorState.CLOSED
        await self.scheduler.stop()
        self.scheduler.on_stored = None
        self.scheduler.on_tick = None
        self._snapshot_listeners.clear()
        self._event_listeners.clear()

    def _reset_series(self) -> ViewSnapshot:
        self.selection.bind(self.current_key)
        self.selection.clear()
        if self.state is CoordinatorState.SELECTING_POINT:
            self.state = CoordinatorState.LOADED
        if self.state is CoordinatorState.LOADED:
            self.scheduler.refresh_now(reason="switch")
        return self._publish()

    def _on_series_stored(self, key: SeriesKey) -> None:
        if self.state is CoordinatorState.CLOSED or key != self.current_key:
            return
        if self.selection.is_selected:
            series = self.active_series
            if series is None or self.selection.index >= len(series):
                self.selection.clear()
                if self.state is CoordinatorState.SELECTING_POINT:
                    self.state = CoordinatorState.LOADED
        self._publish()

    def _publish(self) -> ViewSnapshot:
        snapshot = self.snapshot()
        if snapshot == self._last_snapshot:
            return snapshot
        self._last_snapshot = snapshot
        if self.human_logger is not None:
            self.human_logger.snapshot(snapshot)
        for listener in list(self._snapshot_listeners):
            listener(snapshot)
        return snapshot

    def _emit_event(self, event_type: str, payload: dict[str, Any]) -> None:
        for listener in list(self._event_listeners):
            listener(event_type, payload)
