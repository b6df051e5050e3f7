from __future__ import annotations

import pytest

from tokencard.domain.models import Period, make_series
from tokencard.formatting import format_price, format_short_day, short_currency_symbol


def test_short_day_formats() -> None:
    assert format_short_day(1_700_000_000) == "14 Nov"
    assert format_short_day(1_700_000_000, with_time=True) == "14 Nov, 22:13"
    assert format_short_day(1_700_000_000, with_time=True, with_year=True) == "14 Nov 2023, 22:13"


def test_currency_symbols_and_prices() -> None:
    assert short_currency_symbol("usd") == "$"
    assert short_currency_symbol("TON") == "TON"
    assert format_price(1234.5, "USD") == "$1,234.50"
    assert format_price(0.12346, "BTC", precision=4) == "0.1235 BTC"


def test_period_parsing_and_order() -> None:
    assert Period.parse(" 1d ") is Period.DAY
    assert Period.parse("1W") is Period.WEEK
    assert Period.ALL.label == "All"
    assert Period.ordered()[-1] is Period.ALL
    with pytest.raises(ValueError):
        Period.parse("5Y")


def test_series_must_not_go_back_in_time() -> None:
    assert make_series([(1, 1), (1, 2)])[1].price == 2.0
    with pytest.raises(ValueError, match="non-decreasing"):
        make_series([(2, 1.0), (1, 1.0)])
