"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from tokencard.domain.models import DEFAULT_PERIOD, DEFAULT_PRICE_CURRENCY, Asset, Period
from tokencard.errors import ConfigError

DATA_SOURCES = {"csv", "http", "yfinance"}


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse truthy environment strings."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_optional_positive_int(value: str | None, *, field_name: str) -> int | None:
    """Parse optional positive integer values from env strings."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        parsed = int(text)
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc
    if parsed <= 0:
        raise ConfigError(f"{field_name} must be positive")
    return parsed


def parse_float(value: str | None, default: float, *, field_name: str) -> float:
    """Parse a float env value, falling back to `default` when unset."""
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be a number") from exc


def parse_int(value: str | None, default: int, *, field_name: str) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc


def normalize_currency(value: str | None) -> str | None:
    """Uppercase a currency code; blank means unset."""
    if value is None:
        return None
    text = value.strip().upper()
    return text or None


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    asset_id: str = "toncoin"
    asset_symbol: str = "TON"
    asset_name: str = "Toncoin"
    asset_decimals: int = 9
    asset_amount: int = 0
    asset_price: float = 0.0
    asset_price_usd: float = 0.0
    asset_cmc_slug: str = ""
    price_currency: str = DEFAULT_PRICE_CURRENCY
    base_currency: str | None = None
    period: Period = DEFAULT_PERIOD
    refresh_interval_seconds: float = 5.0
    offline_timeout_seconds: float = 120.0
    max_ticks: int | None = None
    data_source: str = "csv"
    history_data_dir: str = "history_data"
    history_api_url: str = ""
    events_dir: str = "runs"
    log_level: str = "INFO"
    log_file: str = ""
    write_report: bool = True

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        period_text = os.getenv("PERIOD")
        try:
            period = Period.parse(period_text) if period_text and period_text.strip() else DEFAULT_PERIOD
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        raw = cls(
            asset_id=str(os.getenv("ASSET_ID", "toncoin")).strip(),
            asset_symbol=str(os.getenv("ASSET_SYMBOL", "TON")).strip().upper(),
            asset_name=str(os.getenv("ASSET_NAME", "Toncoin")).strip(),
            asset_decimals=parse_int(os.getenv("ASSET_DECIMALS"), 9, field_name="asset_decimals"),
            asset_amount=parse_int(os.getenv("ASSET_AMOUNT"), 0, field_name="asset_amount"),
            asset_price=parse_float(os.getenv("ASSET_PRICE"), 0.0, field_name="asset_price"),
            asset_price_usd=parse_float(
                os.getenv("ASSET_PRICE_USD"), 0.0, field_name="asset_price_usd"
            ),
            asset_cmc_slug=str(os.getenv("ASSET_CMC_SLUG", "")).strip(),
            price_currency=normalize_currency(os.getenv("PRICE_CURRENCY")) or DEFAULT_PRICE_CURRENCY,
            base_currency=normalize_currency(os.getenv("BASE_CURRENCY")),
            period=period,
            refresh_interval_seconds=parse_float(
                os.getenv("REFRESH_INTERVAL_SECONDS"), 5.0, field_name="refresh_interval_seconds"
            ),
            offline_timeout_seconds=parse_float(
                os.getenv("OFFLINE_TIMEOUT_SECONDS"), 120.0, field_name="offline_timeout_seconds"
            ),
            max_ticks=parse_optional_positive_int(os.getenv("MAX_TICKS"), field_name="max_ticks"),
            data_source=str(os.getenv("DATA_SOURCE", "csv")).strip().lower(),
            history_data_dir=str(os.getenv("HISTORY_DATA_DIR", "history_data")).strip(),
            history_api_url=str(os.getenv("HISTORY_API_URL", "")).strip(),
            events_dir=str(os.getenv("EVENTS_DIR", "runs")).strip(),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            log_file=str(os.getenv("LOG_FILE", "")).strip(),
            write_report=parse_bool(os.getenv("WRITE_REPORT"), True),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        overrides = dict(kwargs)
        period_override = overrides.get("period")
        if isinstance(period_override, str) and not isinstance(period_override, Period):
            try:
                overrides["period"] = Period.parse(period_override)
            except ValueError as exc:
                raise ConfigError(str(exc)) from exc
        for key in ("base_currency", "price_currency"):
            value = overrides.get(key)
            if isinstance(value, str):
                overrides[key] = normalize_currency(value)
        updated = replace(self, **overrides)
        return updated.validate()

    def build_asset(self) -> Asset:
        """Asset props the card is opened with."""
        return Asset(
            asset_id=self.asset_id,
            symbol=self.asset_symbol,
            decimals=self.asset_decimals,
            price=self.asset_price,
            price_currency=self.price_currency,
            amount=self.asset_amount,
            name=self.asset_name,
            price_usd=self.asset_price_usd,
            cmc_slug=self.asset_cmc_slug or None,
        )

    def validate(self) -> Self:
        """Validate settings fields."""
        if not self.asset_id:
            raise ConfigError("asset_id must be set")
        if not self.asset_symbol:
            raise ConfigError("asset_symbol must be set")
        if self.asset_decimals < 0 or self.asset_decimals > 36:
            raise ConfigError("asset_decimals must be between 0 and 36")
        if self.asset_amount < 0:
            raise ConfigError("asset_amount must not be negative")
        if self.asset_price < 0:
            raise ConfigError("asset_price must not be negative")
        if not self.price_currency:
            raise ConfigError("price_currency must be set")
        if self.refresh_interval_seconds <= 0:
            raise ConfigError("refresh_interval_seconds must be positive")
        if self.offline_timeout_seconds <= 0:
            raise ConfigError("offline_timeout_seconds must be positive")
        if self.max_ticks is not None and self.max_ticks <= 0:
            raise ConfigError("max_ticks must be positive")
        if self.data_source not in DATA_SOURCES:
            raise ConfigError("data_source must be one of csv, http, yfinance")
        if self.data_source == "http" and not self.history_api_url:
            raise ConfigError("HISTORY_API_URL is required for the http data source")
        return self
