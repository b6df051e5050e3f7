"""HTTP JSON price history provider."""

from __future__ import annotations

from time import sleep
from typing import Any

import requests

from tokencard.domain.models import Period, PriceSeries
from tokencard.errors import HistoryProviderError
from tokencard.history.base import series_from_pairs


class HttpHistoryProvider:
    """Fetch price history from a wallet backend endpoint.

    The endpoint is queried as `GET {base_url}/prices/chart/{asset_id}` with
    `period` and `base` query parameters and must return either
    `[[ts, price], ...]` or `{"history": [[ts, price], ...]}`.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 10,
        max_retries: int = 3,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def get_history(self, asset_id: str, period: Period, currency: str) -> PriceSeries:
        payload = self._request_with_retry(
            path=f"/prices/chart/{asset_id}",
            params={"period": period.value, "base": currency.strip().upper()},
        )
        rows = self._extract_rows(payload)
        try:
            return series_from_pairs(rows)
        except ValueError as exc:
            raise HistoryProviderError(f"Malformed history for {asset_id}: {exc}") from exc

    def _request_with_retry(self, path: str, params: dict[str, str]) -> Any:
        url = f"{self.base_url}{path}"
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
            except requests.RequestException as exc:
                if attempt == self.max_retries:
                    raise HistoryProviderError(f"History request failed: {exc}") from exc
                sleep(float(attempt))
                continue
            if response.status_code == 429:
                if attempt == self.max_retries:
                    raise HistoryProviderError("History rate limit exceeded")
                sleep(float(attempt))
                continue
            if response.status_code >= 500:
                if attempt == self.max_retries:
                    raise HistoryProviderError(f"History server error: {response.status_code}")
                sleep(float(attempt))
                continue
            if response.status_code >= 400:
                detail = response.text.strip() or "No response body"
                raise HistoryProviderError(f"History error {response.status_code}: {detail}")
            try:
                return response.json()
            except ValueError as exc:
                raise HistoryProviderError(f"History response is not JSON: {exc}") from exc
        raise HistoryProviderError("History request exhausted retries")

    @staticmethod
    def _extract_rows(payload: Any) -> list[Any]:
        if isinstance(payload, dict):
            payload = payload.get("history", payload.get("prices", []))
        if not isinstance(payload, list):
            raise HistoryProviderError("History payload must be a list of [timestamp, price] pairs")
        rows: list[Any] = []
        for row in payload:
            if isinstance(row, (list, tuple)) and len(row) >= 2:
                rows.append(row)
        return rows
