from __future__ import annotations

from tokencard.domain.models import Period, SeriesKey, make_series
from tokencard.history.store import PriceHistoryStore


def test_store_distinguishes_absent_from_empty() -> None:
    store = PriceHistoryStore()

    assert store.get("toncoin", Period.DAY, "USD") is None

    store.put("toncoin", Period.DAY, "USD", ())

    assert store.get("toncoin", Period.DAY, "USD") == ()
    assert store.get("toncoin", Period.WEEK, "USD") is None


def test_store_is_last_write_wins_per_key() -> None:
    store = PriceHistoryStore()
    store.put("toncoin", Period.DAY, "USD", make_series([(1, 1.0), (2, 2.0)]))
    store.put("toncoin", Period.DAY, "USD", make_series([(3, 3.0)]))

    series = store.get("toncoin", Period.DAY, "USD")

    assert series is not None
    assert [point.price for point in series] == [3.0]
    assert len(store) == 1


def test_store_keys_include_currency() -> None:
    store = PriceHistoryStore()
    store.put("toncoin", Period.DAY, "USD", make_series([(1, 5.0)]))
    store.put_key(SeriesKey("toncoin", Period.DAY, "EUR"), make_series([(1, 4.6)]))

    assert store.get("toncoin", Period.DAY, "EUR")[0].price == 4.6
    assert store.get_key(SeriesKey("toncoin", Period.DAY, "USD"))[0].price == 5.0
    assert set(store.periods_for("toncoin", "USD")) == {Period.DAY}

    store.clear()

    assert store.get("toncoin", Period.DAY, "USD") is None
