"""Pure derivation of the card's displayed values."""

from __future__ import annotations

from tokencard.domain.models import (
    NO_SELECTION,
    Asset,
    ChangeSign,
    ChartState,
    Period,
    PricePoint,
    PriceSeries,
    ViewSnapshot,
)
from tokencard.engine.staleness import OFFLINE_TIMEOUT_SECONDS, is_stale, tail_timestamp
from tokencard.formatting import NOW_LABEL, format_short_day, short_currency_symbol

LIVE_PRICE_PRECISION = 2
SELECTED_PRICE_PRECISION = 4
CHANGE_PERCENT_DIGITS = 2
CHANGE_ABSOLUTE_DIGITS = 4


def resolve_chart_currency(asset: Asset, base_currency: str | None) -> str:
    """Currency the chart is fetched and shown in for a base currency choice."""
    if base_currency is None or not base_currency.strip():
        return asset.price_currency.upper()
    code = base_currency.strip().upper()
    if code in {asset.symbol.upper(), asset.price_currency.upper()}:
        return asset.price_currency.upper()
    return code


def is_native_currency(asset: Asset, currency: str) -> bool:
    return currency.strip().upper() == asset.price_currency.upper()


def selected_point(series: PriceSeries | None, selected_index: int) -> PricePoint | None:
    if not series or selected_index == NO_SELECTION:
        return None
    if 0 <= selected_index < len(series):
        return series[selected_index]
    return None


def initial_price(series: PriceSeries | None) -> float | None:
    """First non-zero price searching from the start of the series."""
    for point in series or ():
        if point.price:
            return point.price
    return None


def latest_price(asset: Asset, series: PriceSeries | None, currency: str) -> float | None:
    """Price the change indicator compares against; never the scrubbed point."""
    if is_native_currency(asset, currency) and asset.price:
        return asset.price
    if series:
        return series[-1].price
    return None


def display_price(
    asset: Asset,
    series: PriceSeries | None,
    selected_index: int,
    currency: str,
) -> float:
    point = selected_point(series, selected_index)
    if point is not None:
        return point.price
    if series and is_native_currency(asset, currency):
        return series[-1].price
    return asset.price


def price_change(asset: Asset, series: PriceSeries | None, currency: str) -> float:
    initial = initial_price(series)
    latest = latest_price(asset, series, currency)
    if not initial or not latest:
        return 0.0
    return latest - initial


def change_sign(change: float) -> ChangeSign:
    if change > 0:
        return ChangeSign.UP
    if change < 0:
        return ChangeSign.DOWN
    return ChangeSign.FLAT


def change_metrics(change: float, initial: float | None) -> tuple[float, float]:
    """Return `(absolute, percent)`, both non-negative and zero without a change."""
    if not change or not initial:
        return 0.0, 0.0
    absolute = abs(round(change, CHANGE_ABSOLUTE_DIGITS))
    percent = abs(round(change / initial * 100.0, CHANGE_PERCENT_DIGITS))
    return absolute, percent


def derive_snapshot(
    asset: Asset,
    series: PriceSeries | None,
    selected_index: int,
    period: Period,
    currency: str,
    now: float,
    timeout: float = OFFLINE_TIMEOUT_SECONDS,
) -> ViewSnapshot:
    """Combine asset props, the active series and the selection into a snapshot.

    `series` is None until the first fetch for the active key completes; an
    empty tuple means the service answered with no points. Identical inputs
    always produce an equal snapshot.
    """
    point = selected_point(series, selected_index)
    last_update = tail_timestamp(series)
    stale = is_stale(last_update, now, timeout)

    price = display_price(asset, series, selected_index, currency)
    initial = initial_price(series)
    change = price_change(asset, series, currency)
    change_absolute, change_percent = change_metrics(change, initial)

    if point is not None:
        display_date = format_short_day(point.timestamp, with_time=True, with_year=True)
        display_timestamp: int | None = point.timestamp
    elif stale and last_update is not None:
        display_date = format_short_day(last_update, with_time=True, with_year=False)
        display_timestamp = last_update
    else:
        display_date = NOW_LABEL
        display_timestamp = None

    if series is None:
        chart_state = ChartState.LOADING
    elif series:
        chart_state = ChartState.READY
    else:
        chart_state = ChartState.EMPTY

    return ViewSnapshot(
        asset_id=asset.asset_id,
        period=period,
        currency=currency,
        currency_symbol=short_currency_symbol(currency),
        display_price=price,
        price_precision=SELECTED_PRICE_PRECISION if point is not None else LIVE_PRICE_PRECISION,
        display_date=display_date,
        change_absolute=change_absolute,
        change_percent=change_percent,
        change_sign=change_sign(change),
        is_stale=stale,
        is_loading=series is None,
        selected_index=selected_index if point is not None else None,
        display_timestamp=display_timestamp,
        holding_value=asset.balance * price,
        chart_state=chart_state,
        history_start_price=series[0].price if series else None,
        history_start_date=format_short_day(series[0].timestamp) if series else None,
        period_label=period.label,
        show_period_switcher=bool(series) or asset.price_usd != 0,
        show_change=bool(change_absolute),
        cmc_url=f"https://coinmarketcap.com/currencies/{asset.cmc_slug}/" if asset.cmc_slug else None,
    )
