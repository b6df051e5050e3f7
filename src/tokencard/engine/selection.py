"""Chart scrub selection state."""

from __future__ import annotations

from tokencard.domain.models import NO_SELECTION, PriceSeries, SeriesKey


class SelectionState:
    """Index of the scrubbed chart point, bound to one series identity.

    The selection is only meaningful for the series it was made on, so it
    is cleared whenever the bound key changes.
    """

    def __init__(self) -> None:
        self._index = NO_SELECTION
        self._key: SeriesKey | None = None

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_selected(self) -> bool:
        return self._index != NO_SELECTION

    def select(self, index: int, series: PriceSeries | None) -> bool:
        """Select `index` if the series has a point there; reject otherwise."""
        if series is None or index < 0 or index >= len(series):
            return False
        self._index = index
        return True

    def clear(self) -> bool:
        """Drop the selection. Returns whether anything was selected."""
        was_selected = self.is_selected
        self._index = NO_SELECTION
        return was_selected

    def bind(self, key: SeriesKey) -> bool:
        """Attach to a series identity, clearing on change."""
        if key == self._key:
            return False
        self._key = key
        return self.clear()
