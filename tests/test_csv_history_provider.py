from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from tokencard.domain.models import Period
from tokencard.errors import HistoryProviderError
from tokencard.history.csv_history import CsvHistoryProvider


def _write_csv(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = pd.DataFrame(
        {
            "timestamp": [1_700_000_120, 1_700_000_000, 1_700_000_060, 1_700_000_180],
            "price": [12.0, 10.0, 0.0, "bad"],
        }
    )
    frame.to_csv(path, index=False)


def test_csv_provider_reads_nested_layout_sorted_and_clean(tmp_path: Path) -> None:
    _write_csv(tmp_path / "toncoin" / "USD" / "1D.csv")
    provider = CsvHistoryProvider(data_dir=str(tmp_path))

    series = provider.get_history("toncoin", Period.DAY, "usd")

    assert [point.timestamp for point in series] == [1_700_000_000, 1_700_000_060, 1_700_000_120]
    assert [point.price for point in series] == [10.0, 0.0, 12.0]


def test_csv_provider_supports_flat_names_and_date_columns(tmp_path: Path) -> None:
    frame = pd.DataFrame(
        {
            "Date": ["2025-01-02T00:00:00Z", "2025-01-01T00:00:00Z"],
            "Close": [2.0, 1.0],
        }
    )
    frame.to_csv(tmp_path / "TONCOIN_EUR_7D.csv", index=False)
    provider = CsvHistoryProvider(data_dir=str(tmp_path))

    series = provider.get_history("toncoin", Period.WEEK, "EUR")

    assert [point.timestamp for point in series] == [1_735_689_600, 1_735_776_000]
    assert series[-1].price == 2.0


def test_csv_provider_converts_millisecond_epochs(tmp_path: Path) -> None:
    frame = pd.DataFrame({"timestamp": [1_700_000_000_000], "price": [3.0]})
    frame.to_csv(tmp_path / "toncoin_USD_ALL.csv", index=False)
    provider = CsvHistoryProvider(data_dir=str(tmp_path))

    series = provider.get_history("toncoin", Period.ALL, "USD")

    assert series[0].timestamp == 1_700_000_000


def test_csv_provider_empty_file_is_empty_series(tmp_path: Path) -> None:
    (tmp_path / "toncoin_USD_1Y.csv").write_text("timestamp,price\n", encoding="utf-8")
    provider = CsvHistoryProvider(data_dir=str(tmp_path))

    assert provider.get_history("toncoin", Period.YEAR, "USD") == ()


def test_csv_provider_missing_file_raises(tmp_path: Path) -> None:
    provider = CsvHistoryProvider(data_dir=str(tmp_path))

    with pytest.raises(HistoryProviderError, match="No CSV found"):
        provider.get_history("toncoin", Period.DAY, "USD")
