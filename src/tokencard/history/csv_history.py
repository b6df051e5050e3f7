"""CSV-backed price history provider."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from tokencard.domain.models import Period, PriceSeries
from tokencard.errors import HistoryProviderError
from tokencard.history.base import series_from_frame


class CsvHistoryProvider:
    """Load price history from local CSV files.

    Files are looked up as `<dir>/<ASSET>/<CURRENCY>/<PERIOD>.csv` first and
    `<dir>/<ASSET>_<CURRENCY>_<PERIOD>.csv` second. The file is re-read on
    every call so external writers can refresh it between ticks.
    """

    def __init__(self, data_dir: str) -> None:
        self.data_dir = Path(data_dir)

    def get_history(self, asset_id: str, period: Period, currency: str) -> PriceSeries:
        path = self._resolve_path(asset_id, period, currency)
        if path is None:
            raise HistoryProviderError(
                f"No CSV found for {asset_id}/{period.value}/{currency} under {self.data_dir}"
            )
        try:
            frame = pd.read_csv(path)
        except pd.errors.EmptyDataError:
            return ()
        except (OSError, pd.errors.ParserError) as exc:
            raise HistoryProviderError(f"Failed to read {path}: {exc}") from exc
        try:
            return series_from_frame(frame)
        except ValueError as exc:
            raise HistoryProviderError(f"{path}: {exc}") from exc

    def _resolve_path(self, asset_id: str, period: Period, currency: str) -> Path | None:
        asset = asset_id.strip()
        code = currency.strip().upper()
        period_name = period.value
        candidates = [
            self.data_dir / asset / code / f"{period_name}.csv",
            self.data_dir / asset.upper() / code / f"{period_name}.csv",
            self.data_dir / asset.lower() / code / f"{period_name}.csv",
            self.data_dir / f"{asset}_{code}_{period_name}.csv",
            self.data_dir / f"{asset.upper()}_{code}_{period_name}.csv",
            self.data_dir / f"{asset.lower()}_{code}_{period_name}.csv",
        ]
        seen: set[Path] = set()
        for candidate in candidates:
            if candidate in seen:
                continue
            seen.add(candidate)
            if candidate.exists():
                return candidate
        return None
