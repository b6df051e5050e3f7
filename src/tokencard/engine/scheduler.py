"""Periodic and on-demand price history refresh."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

from tokencard.domain.models import Period, PriceSeries, SeriesKey
from tokencard.history.store import PriceHistoryStore
from tokencard.logging.logger import CardLogger

REFRESH_INTERVAL_SECONDS = 5.0

FetchFn = Callable[[str, Period, str], Awaitable[PriceSeries]]


class RefreshScheduler:
    """Issue fire-and-forget history fetches for the current series key.

    Ticks and explicit triggers share `refresh_now`. Each request captures
    its key at dispatch time and always stores its response under that key,
    so a late answer for a key the view has moved away from is kept for
    later but never mistaken for the current series.
    """

    def __init__(
        self,
        fetch: FetchFn,
        store: PriceHistoryStore,
        interval_seconds: float = REFRESH_INTERVAL_SECONDS,
        on_stored: Callable[[SeriesKey], None] | None = None,
        on_tick: Callable[[], None] | None = None,
        human_logger: CardLogger | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.fetch = fetch
        self.store = store
        self.interval_seconds = float(interval_seconds)
        self.on_stored = on_stored
        self.on_tick = on_tick
        self.human_logger = human_logger
        self._current_key: Callable[[], SeriesKey | None] = lambda: None
        self._loop_task: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self.ticks = 0

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def start(self, current_key: Callable[[], SeriesKey | None]) -> None:
        """Begin ticking; must be called from inside a running event loop."""
        self._current_key = current_key
        if self.is_running:
            return
        self._loop_task = asyncio.get_running_loop().create_task(self._run())

    def refresh_now(self, reason: str = "manual") -> asyncio.Task[None] | None:
        """Dispatch a fetch for the current key without waiting for it."""
        key = self._current_key()
        if key is None:
            return None
        if self.human_logger is not None:
            self.human_logger.fetch_requested(key.describe(), reason)
        task = asyncio.get_running_loop().create_task(self._fetch(key))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def stop(self) -> None:
        """Cancel pending ticks. In-flight fetches keep running."""
        task = self._loop_task
        self._loop_task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def drain(self) -> None:
        """Wait for every in-flight fetch to land in the store."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.ticks += 1
            self.refresh_now(reason="tick")
            if self.on_tick is not None:
                self._notify(self.on_tick, "tick")

    async def _fetch(self, key: SeriesKey) -> None:
        try:
            series = await self.fetch(key.asset_id, key.period, key.currency)
        except Exception as exc:
            # The next tick re-requests; the stored series stays as it was.
            if self.human_logger is not None:
                self.human_logger.fetch_failed(key.describe(), str(exc))
            return
        self.store.put_key(key, series)
        is_current = key == self._current_key()
        if self.human_logger is not None:
            self.human_logger.fetch_completed(key.describe(), len(series), is_current)
        on_stored = self.on_stored
        if on_stored is not None:
            self._notify(lambda: on_stored(key), "stored")

    def _notify(self, callback: Callable[[], None], stage: str) -> None:
        # Listener failures are logged; the tick loop keeps running.
        try:
            callback()
        except Exception as exc:
            if self.human_logger is not None:
                self.human_logger.error(f"{stage} callback failed: {exc}")
