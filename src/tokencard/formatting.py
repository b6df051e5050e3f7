"""Small formatting helpers used by the card snapshot."""

from __future__ import annotations

from datetime import UTC, datetime

NOW_LABEL = "Now"

SHORT_CURRENCY_SYMBOLS = {
    "USD": "$",
    "USDT": "$",
    "EUR": "€",
    "RUB": "₽",
    "CNY": "¥",
}


def short_currency_symbol(currency: str) -> str:
    """Return the compact symbol for a currency code, or the code itself."""
    code = currency.strip().upper()
    return SHORT_CURRENCY_SYMBOLS.get(code, code)


def format_short_day(timestamp: int | float, with_time: bool = False, with_year: bool = False) -> str:
    """Format unix seconds as `3 Mar`, optionally with year and `HH:MM` time (UTC)."""
    moment = datetime.fromtimestamp(float(timestamp), tz=UTC)
    text = f"{moment.day} {moment:%b}"
    if with_year:
        text = f"{text} {moment.year}"
    if with_time:
        text = f"{text}, {moment:%H:%M}"
    return text


def format_price(value: float, currency: str, precision: int = 2) -> str:
    """Format a price with its short currency symbol."""
    symbol = short_currency_symbol(currency)
    amount = f"{value:,.{max(0, precision)}f}"
    if len(symbol) == 1:
        return f"{symbol}{amount}"
    return f"{amount} {symbol}"
