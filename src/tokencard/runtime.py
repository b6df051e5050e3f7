"""Runtime wiring and card session loop orchestration."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any
from uuid import uuid4

from tokencard.config import Settings
from tokencard.domain.events import CardEvent
from tokencard.domain.models import ViewSnapshot
from tokencard.engine.coordinator import ViewCoordinator
from tokencard.engine.scheduler import RefreshScheduler
from tokencard.errors import ConfigError
from tokencard.history.base import PriceHistoryProvider
from tokencard.history.csv_history import CsvHistoryProvider
from tokencard.history.http_history import HttpHistoryProvider
from tokencard.history.service import HistoryService
from tokencard.history.store import PriceHistoryStore
from tokencard.history.yfinance_history import YFinanceHistoryProvider
from tokencard.logging.event_sink import JsonlEventSink, generate_plotly_report
from tokencard.logging.logger import CardLogger


def run(settings: Settings) -> int:
    """Open one token card view and keep it refreshed until done."""
    session_id = uuid4().hex
    run_directory = Path(settings.events_dir) / session_id
    run_directory.mkdir(parents=True, exist_ok=True)
    events_path = run_directory / "events.jsonl"
    report_path = run_directory / "report.html"

    event_sink = JsonlEventSink(str(events_path))
    human_logger = CardLogger(level=settings.log_level, log_file=settings.log_file or None)

    exit_code = 0
    try:
        provider = build_history_provider(settings)
        snapshots = asyncio.run(
            run_session(
                settings=settings,
                provider=provider,
                session_id=session_id,
                event_sink=event_sink,
                human_logger=human_logger,
            )
        )
        human_logger.session_finished(settings.max_ticks or 0, len(snapshots))
    except KeyboardInterrupt:
        exit_code = 0
    except Exception as exc:
        human_logger.error(str(exc))
        event_sink.emit(
            CardEvent(
                session_id=session_id,
                asset_id=settings.asset_id,
                event_type="error",
                payload={"message": str(exc)},
            )
        )
        exit_code = 1
    finally:
        if settings.write_report:
            generate_plotly_report(str(events_path), str(report_path))

    return exit_code


async def run_session(
    settings: Settings,
    provider: PriceHistoryProvider,
    session_id: str,
    event_sink: JsonlEventSink,
    human_logger: CardLogger,
    clock: Callable[[], float] = time.time,
) -> list[ViewSnapshot]:
    """Drive a coordinator for `max_ticks` refresh intervals, or until cancelled."""
    coordinator = build_coordinator(settings, provider, human_logger=human_logger, clock=clock)
    snapshots: list[ViewSnapshot] = []

    def on_snapshot(snapshot: ViewSnapshot) -> None:
        snapshots.append(snapshot)
        event_sink.emit(
            CardEvent(
                session_id=session_id,
                asset_id=snapshot.asset_id,
                event_type="snapshot",
                payload=snapshot.to_record(),
            )
        )

    def on_event(event_type: str, payload: dict[str, Any]) -> None:
        event_sink.emit(
            CardEvent(
                session_id=session_id,
                asset_id=coordinator.asset.asset_id,
                event_type=event_type,
                payload=payload,
            )
        )

    coordinator.subscribe(on_snapshot)
    coordinator.subscribe_events(on_event)

    human_logger.session_started(
        session_id, settings.asset_id, coordinator.period.value, coordinator.chart_currency
    )
    event_sink.emit(
        CardEvent(
            session_id=session_id,
            asset_id=settings.asset_id,
            event_type="session_started",
            payload={
                "period": coordinator.period.value,
                "currency": coordinator.chart_currency,
                "data_source": settings.data_source,
            },
        )
    )

    scheduler = coordinator.scheduler
    coordinator.start()
    try:
        if settings.max_ticks is None:
            await asyncio.Event().wait()
        else:
            while scheduler.ticks < settings.max_ticks:
                await asyncio.sleep(settings.refresh_interval_seconds / 2)
            await scheduler.drain()
            coordinator.tick()
    finally:
        await coordinator.close()
        await scheduler.drain()
    return snapshots


def build_coordinator(
    settings: Settings,
    provider: PriceHistoryProvider,
    human_logger: CardLogger | None = None,
    clock: Callable[[], float] = time.time,
) -> ViewCoordinator:
    """Assemble store, scheduler and coordinator for one asset."""
    service = HistoryService(provider)
    store = PriceHistoryStore()
    scheduler = RefreshScheduler(
        fetch=service.request_price_history,
        store=store,
        interval_seconds=settings.refresh_interval_seconds,
        human_logger=human_logger,
    )
    return ViewCoordinator(
        asset=settings.build_asset(),
        store=store,
        scheduler=scheduler,
        period=settings.period,
        base_currency=settings.base_currency,
        offline_timeout=settings.offline_timeout_seconds,
        clock=clock,
        human_logger=human_logger,
    )


def build_history_provider(settings: Settings) -> PriceHistoryProvider:
    """Select history provider from the configured data source."""
    if settings.data_source == "http":
        if not settings.history_api_url:
            raise ConfigError("HISTORY_API_URL is required for the http data source")
        return HttpHistoryProvider(base_url=settings.history_api_url)
    if settings.data_source == "yfinance":
        return YFinanceHistoryProvider(symbols={settings.asset_id: settings.asset_symbol})
    return CsvHistoryProvider(data_dir=settings.history_data_dir)
