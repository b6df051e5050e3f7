from __future__ import annotations

from pathlib import Path

from tokencard.domain.events import CardEvent
from tokencard.domain.models import Asset, Period, make_series
from tokencard.engine.metrics import derive_snapshot
from tokencard.logging.event_sink import JsonlEventSink, generate_plotly_report, load_events


def test_sink_appends_json_lines(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "events.jsonl"
    sink = JsonlEventSink(str(path))
    snapshot = derive_snapshot(
        Asset(asset_id="toncoin", symbol="TON", price=5.0),
        make_series([(1_700_000_000, 4.0)]),
        -1,
        Period.DAY,
        "EUR",
        now=1_700_000_010,
    )

    sink.emit(CardEvent(session_id="s1", asset_id="toncoin", event_type="session_started"))
    sink.emit(
        CardEvent(
            session_id="s1",
            asset_id="toncoin",
            event_type="snapshot",
            payload=snapshot.to_record(),
        )
    )

    records = load_events(path)
    assert [record["event_type"] for record in records] == ["session_started", "snapshot"]
    assert records[1]["payload"]["currency_symbol"] == "€"
    assert records[1]["payload"]["change_sign"] == "flat"
    assert records[1]["payload"]["period"] == "1D"


def test_report_renders_with_and_without_events(tmp_path: Path) -> None:
    empty_report = tmp_path / "empty.html"
    generate_plotly_report(str(tmp_path / "missing.jsonl"), str(empty_report))
    assert empty_report.exists()

    events_path = tmp_path / "events.jsonl"
    sink = JsonlEventSink(str(events_path))
    sink.emit(
        CardEvent(
            session_id="s1",
            asset_id="toncoin",
            event_type="snapshot",
            payload={"display_price": 5.0, "period": "1D", "currency": "USD", "display_date": "Now"},
        )
    )
    report = tmp_path / "report.html"
    generate_plotly_report(str(events_path), str(report))

    html = report.read_text(encoding="utf-8")
    assert "Displayed Price" in html
    assert "Session Event Counts" in html
