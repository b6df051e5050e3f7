"""Concise human-readable card session logger."""

from __future__ import annotations

import logging

from tokencard.domain.models import ViewSnapshot
from tokencard.formatting import format_price


class CardLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO", log_file: str | None = None) -> None:
        self._logger = logging.getLogger("tokencard")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler = logging.StreamHandler()
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)
            if log_file:
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(formatter)
                self._logger.addHandler(file_handler)

    def session_started(self, session_id: str, asset_id: str, period: str, currency: str) -> None:
        self._logger.info(
            "session | %s | %s | period %s | currency %s",
            session_id[:10],
            asset_id,
            period,
            currency,
        )

    def fetch_requested(self, key: str, reason: str) -> None:
        self._logger.debug("fetch | %s | %s", key, reason)

    def fetch_completed(self, key: str, points: int, is_current: bool) -> None:
        parts = [f"stored | {key} | points {points}"]
        if not is_current:
            parts.append("background")
        self._logger.debug(" | ".join(parts))

    def fetch_failed(self, key: str, message: str) -> None:
        self._logger.warning("fetch failed | %s | %s", key, message)

    def switched(self, kind: str, value: str) -> None:
        self._logger.info("switch | %s %s", kind, value)

    def selection(self, index: int | None, accepted: bool = True) -> None:
        if not accepted:
            self._logger.debug("selection | index %s rejected", index)
            return
        label = "live" if index is None else f"index {index}"
        self._logger.debug("selection | %s", label)

    def snapshot(self, snapshot: ViewSnapshot) -> None:
        parts = [
            f"snapshot | {snapshot.asset_id} | {snapshot.period_label}",
            format_price(snapshot.display_price, snapshot.currency, snapshot.price_precision),
            snapshot.display_date,
        ]
        if snapshot.show_change:
            parts.append(
                f"{snapshot.change_sign.arrow} {snapshot.change_percent:.2f}% "
                f"{format_price(snapshot.change_absolute, snapshot.currency, 4)}"
            )
        if snapshot.is_loading:
            parts.append("loading")
        elif snapshot.is_stale:
            parts.append("stale")
        self._logger.info(" | ".join(parts))

    def session_finished(self, ticks: int, snapshots: int) -> None:
        self._logger.info("finished | ticks %s | snapshots %s", ticks, snapshots)

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)
