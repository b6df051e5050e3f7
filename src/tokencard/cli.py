"""Command-line interface for the token card runtime."""

from __future__ import annotations

import argparse
import sys

from tokencard.config import DATA_SOURCES, Settings
from tokencard.domain.models import Period
from tokencard.runtime import run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description="Wallet token card price state engine")
    parser.add_argument("--asset", type=str, help="Asset id used for history requests")
    parser.add_argument("--symbol", type=str, help="Asset ticker symbol")
    parser.add_argument("--price", type=float, help="Live asset price in its native currency")
    parser.add_argument("--amount", type=int, help="Raw balance in the asset's smallest units")
    parser.add_argument("--decimals", type=int, help="Asset decimals")
    parser.add_argument(
        "--period",
        choices=[period.value for period in Period],
        help="History period shown on the chart",
    )
    parser.add_argument("--currency", type=str, help="Base display currency")
    parser.add_argument("--data-source", choices=sorted(DATA_SOURCES), help="History source")
    parser.add_argument("--history-dir", type=str, help="CSV history data directory")
    parser.add_argument("--history-url", type=str, help="HTTP history API base URL")
    parser.add_argument(
        "--interval-seconds", type=float, help="Seconds between history refreshes"
    )
    parser.add_argument("--max-ticks", type=int, help="Stop after this many refresh ticks")
    parser.add_argument("--events-dir", type=str, help="Session outputs directory")
    parser.add_argument("--no-report", action="store_true", help="Skip the HTML session report")
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.asset:
        overrides["asset_id"] = args.asset
    if args.symbol:
        overrides["asset_symbol"] = args.symbol.strip().upper()
    if args.price is not None:
        overrides["asset_price"] = args.price
    if args.amount is not None:
        overrides["asset_amount"] = args.amount
    if args.decimals is not None:
        overrides["asset_decimals"] = args.decimals
    if args.period:
        overrides["period"] = args.period
    if args.currency:
        overrides["base_currency"] = args.currency
    if args.data_source:
        overrides["data_source"] = args.data_source
    if args.history_dir:
        overrides["history_data_dir"] = args.history_dir
    if args.history_url:
        overrides["history_api_url"] = args.history_url
    if args.interval_seconds is not None:
        overrides["refresh_interval_seconds"] = args.interval_seconds
    if args.max_ticks is not None:
        overrides["max_ticks"] = args.max_ticks
    if args.events_dir:
        overrides["events_dir"] = args.events_dir
    if args.no_report:
        overrides["write_report"] = False
    return settings.with_overrides(**overrides)


def main() -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args()
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
