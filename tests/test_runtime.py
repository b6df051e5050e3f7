from __future__ import annotations

import asyncio
from pathlib import Path

import pandas as pd
import pytest

from tokencard.config import Settings
from tokencard.domain.models import Period, PriceSeries, make_series
from tokencard.errors import ConfigError
from tokencard.history.csv_history import CsvHistoryProvider
from tokencard.history.http_history import HttpHistoryProvider
from tokencard.history.service import HistoryService
from tokencard.history.yfinance_history import YFinanceHistoryProvider
from tokencard.logging.event_sink import JsonlEventSink, load_events
from tokencard.logging.logger import CardLogger
from tokencard.runtime import build_history_provider, run, run_session

T0 = 1_700_000_000


def _write_history(data_dir: Path) -> None:
    path = data_dir / "toncoin" / "USD" / "1D.csv"
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(
        {"timestamp": [T0 - 120, T0 - 60, T0], "price": [10.0, 0.0, 12.0]}
    ).to_csv(path, index=False)


def test_history_service_runs_provider_off_loop() -> None:
    class StaticProvider:
        def get_history(self, asset_id: str, period: Period, currency: str) -> PriceSeries:
            return ((1, 2.0), (3, 4.0))  # type: ignore[return-value]

    service = HistoryService(StaticProvider())

    series = asyncio.run(service.request_price_history("toncoin", Period.DAY, "USD"))

    assert series == make_series([(1, 2.0), (3, 4.0)])


def test_run_session_emits_snapshots_for_csv_history(tmp_path: Path) -> None:
    _write_history(tmp_path / "data")
    settings = Settings(
        asset_price=12.0,
        history_data_dir=str(tmp_path / "data"),
        refresh_interval_seconds=0.02,
        max_ticks=2,
    )
    sink = JsonlEventSink(str(tmp_path / "events.jsonl"))

    snapshots = asyncio.run(
        run_session(
            settings=settings,
            provider=CsvHistoryProvider(settings.history_data_dir),
            session_id="session-test",
            event_sink=sink,
            human_logger=CardLogger(level="WARNING"),
            clock=lambda: T0 + 10,
        )
    )

    assert snapshots[0].is_loading
    assert snapshots[-1].display_price == 12.0
    assert snapshots[-1].change_percent == 20.0
    assert snapshots[-1].change_absolute == 2.0
    event_types = [record["event_type"] for record in load_events(tmp_path / "events.jsonl")]
    assert event_types[0] == "session_started"
    assert event_types.count("snapshot") == len(snapshots)


def test_run_writes_events_and_report(tmp_path: Path) -> None:
    _write_history(tmp_path / "data")
    settings = Settings(
        asset_price=12.0,
        history_data_dir=str(tmp_path / "data"),
        events_dir=str(tmp_path / "runs"),
        refresh_interval_seconds=0.02,
        max_ticks=1,
        log_level="WARNING",
    )

    assert run(settings) == 0

    session_dirs = list((tmp_path / "runs").iterdir())
    assert len(session_dirs) == 1
    assert (session_dirs[0] / "events.jsonl").exists()
    assert (session_dirs[0] / "report.html").exists()


def test_missing_history_keeps_card_loading(tmp_path: Path) -> None:
    settings = Settings(
        asset_price=3.0,
        history_data_dir=str(tmp_path / "empty"),
        refresh_interval_seconds=0.02,
        max_ticks=1,
    )

    snapshots = asyncio.run(
        run_session(
            settings=settings,
            provider=CsvHistoryProvider(settings.history_data_dir),
            session_id="session-missing",
            event_sink=JsonlEventSink(str(tmp_path / "events.jsonl")),
            human_logger=CardLogger(level="ERROR"),
        )
    )

    assert snapshots
    assert all(snapshot.is_loading for snapshot in snapshots)
    assert snapshots[-1].display_price == 3.0


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({}, CsvHistoryProvider),
        ({"data_source": "yfinance"}, YFinanceHistoryProvider),
        ({"data_source": "http", "history_api_url": "https://api.example.test"}, HttpHistoryProvider),
    ],
)
def test_build_history_provider(overrides: dict[str, str], expected: type) -> None:
    settings = Settings().with_overrides(**overrides)

    assert isinstance(build_history_provider(settings), expected)


def test_http_provider_without_url_is_a_config_error() -> None:
    settings = Settings(data_source="http")

    with pytest.raises(ConfigError, match="HISTORY_API_URL"):
        build_history_provider(settings)
