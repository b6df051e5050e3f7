"""Offline detection for the active price series."""

from __future__ import annotations

from tokencard.domain.models import PriceSeries

OFFLINE_TIMEOUT_SECONDS = 120.0


def is_stale(last_update: float | None, now: float, timeout: float = OFFLINE_TIMEOUT_SECONDS) -> bool:
    """Return true when there is no update or it is older than `timeout` seconds."""
    if last_update is None:
        return True
    return (now - last_update) > timeout


def tail_timestamp(series: PriceSeries | None) -> int | None:
    """Timestamp of the newest point, or None for absent/empty series."""
    if not series:
        return None
    return series[-1].timestamp
