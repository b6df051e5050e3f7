"""Selection, staleness, refresh and derivation engine."""

from .coordinator import CoordinatorState, ViewCoordinator
from .metrics import derive_snapshot, resolve_chart_currency
from .scheduler import REFRESH_INTERVAL_SECONDS, RefreshScheduler
from .selection import SelectionState
from .staleness import OFFLINE_TIMEOUT_SECONDS, is_stale, tail_timestamp

__all__ = [
    "OFFLINE_TIMEOUT_SECONDS",
    "REFRESH_INTERVAL_SECONDS",
    "CoordinatorState",
    "RefreshScheduler",
    "SelectionState",
    "ViewCoordinator",
    "derive_snapshot",
    "is_stale",
    "resolve_chart_currency",
    "tail_timestamp",
]
