from __future__ import annotations

from tokencard.domain.models import NO_SELECTION, Period, SeriesKey, make_series
from tokencard.engine.selection import SelectionState

SERIES = make_series([(100, 10.0), (200, 11.0), (300, 12.0)])


def test_select_accepts_valid_index() -> None:
    selection = SelectionState()

    assert selection.select(1, SERIES)
    assert selection.index == 1
    assert selection.is_selected


def test_out_of_range_selection_is_rejected_not_clamped() -> None:
    selection = SelectionState()
    selection.select(0, SERIES)

    assert not selection.select(3, SERIES)
    assert not selection.select(-1, SERIES)
    assert not selection.select(0, None)
    assert not selection.select(0, ())
    assert selection.index == 0


def test_clear_resets_to_sentinel() -> None:
    selection = SelectionState()
    selection.select(2, SERIES)

    assert selection.clear()
    assert selection.index == NO_SELECTION
    assert not selection.clear()


def test_binding_a_new_series_key_clears_selection() -> None:
    selection = SelectionState()
    day = SeriesKey("toncoin", Period.DAY, "USD")
    week = SeriesKey("toncoin", Period.WEEK, "USD")
    selection.bind(day)
    selection.select(1, SERIES)

    assert not selection.bind(day)
    assert selection.index == 1

    assert selection.bind(week)
    assert selection.index == NO_SELECTION
