from __future__ import annotations

import pytest

from tokencard.domain.models import make_series
from tokencard.engine.staleness import OFFLINE_TIMEOUT_SECONDS, is_stale, tail_timestamp


def test_missing_update_is_always_stale() -> None:
    assert is_stale(None, now=0.0, timeout=120.0)
    assert is_stale(None, now=1_700_000_000.0)


@pytest.mark.parametrize(
    ("age", "expected"),
    [(0.0, False), (119.0, False), (120.0, False), (120.5, True), (180.0, True)],
)
def test_staleness_is_strictly_greater_than_timeout(age: float, expected: bool) -> None:
    now = 1_700_000_000.0

    assert is_stale(now - age, now, timeout=120.0) is expected


def test_default_timeout_is_two_minutes() -> None:
    assert OFFLINE_TIMEOUT_SECONDS == 120.0


def test_tail_timestamp_handles_absent_and_empty_series() -> None:
    assert tail_timestamp(None) is None
    assert tail_timestamp(()) is None
    assert tail_timestamp(make_series([(10, 1.0), (20, 2.0)])) == 20
