"""JSONL event sink and per-session Plotly report generator."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd
import plotly.express as px

from tokencard.domain.events import CardEvent


class JsonlEventSink:
    """Append-only JSONL writer."""

    def __init__(self, path: str) -> None:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.path = output_path

    def emit(self, event: CardEvent) -> None:
        record = event.to_record()
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, sort_keys=True, ensure_ascii=False))
            handle.write("\n")


def load_events(path: str | Path) -> list[dict[str, Any]]:
    """Load JSONL records from disk."""
    records: list[dict[str, Any]] = []
    input_path = Path(path)
    if not input_path.exists():
        return records
    with input_path.open("r", encoding="utf-8") as handle:
        for line in handle:
            text = line.strip()
            if not text:
                continue
            records.append(json.loads(text))
    return records


def generate_plotly_report(events_jsonl_path: str, output_html_path: str) -> None:
    """Render the displayed price over the session plus event counts."""
    events = load_events(events_jsonl_path)
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    if not events:
        empty_df = pd.DataFrame({"event_type": ["none"], "count": [0]})
        figure = px.bar(empty_df, x="event_type", y="count", title="Session Event Summary")
        figure.write_html(str(output), include_plotlyjs="cdn")
        return

    frame = pd.DataFrame(
        {
            "ts": [event.get("ts") for event in events],
            "event_type": [event.get("event_type") for event in events],
        }
    )
    frame["ts"] = pd.to_datetime(frame["ts"], utc=True, errors="coerce")
    summary = frame.groupby("event_type", dropna=False).size().reset_index(name="count")

    snapshot_rows: list[dict[str, Any]] = []
    for event in events:
        if event.get("event_type") != "snapshot":
            continue
        payload = event.get("payload", {})
        snapshot_rows.append(
            {
                "ts": event.get("ts"),
                "display_price": payload.get("display_price"),
                "series": f"{payload.get('period', '')} {payload.get('currency', '')}".strip(),
                "display_date": payload.get("display_date"),
            }
        )

    html_parts = [
        "<html><head><meta charset='utf-8'><title>tokencard session report</title></head><body>",
    ]
    include_plotlyjs: str | bool = "cdn"
    if snapshot_rows:
        prices = pd.DataFrame(snapshot_rows)
        prices["ts"] = pd.to_datetime(prices["ts"], utc=True, errors="coerce")
        timeline = px.line(
            prices,
            x="ts",
            y="display_price",
            color="series",
            markers=True,
            title="Displayed Price",
            hover_data=["display_date"],
        )
        html_parts.append(timeline.to_html(full_html=False, include_plotlyjs=include_plotlyjs))
        include_plotlyjs = False
    bars = px.bar(summary, x="event_type", y="count", title="Session Event Counts")
    html_parts.append(bars.to_html(full_html=False, include_plotlyjs=include_plotlyjs))
    html_parts.append("</body></html>")
    output.write_text("".join(html_parts), encoding="utf-8")
