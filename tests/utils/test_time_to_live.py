from decimal import Decimal
from typing import Any

import pytest
from dirty_equals import IsDatetime

from kv_store_registry.utils.time_to_live import milliseconds_to_seconds, now, now_plus


@pytest.mark.parametrize(
    ("ms", "seconds"),
    [
        (None, None),
        (0, None),
        (0.0, None),
        (1, 0.001),
        (1500, 1.5),
        (60_000, 60.0),
        (Decimal(250), 0.25),
    ],
)
def test_milliseconds_to_seconds(ms: Any, seconds: float | None) -> None:
    assert milliseconds_to_seconds(ms=ms) == seconds


@pytest.mark.parametrize("ms", [True, False, "1000", [1000]])
def test_milliseconds_to_seconds_rejects_non_numbers(ms: Any) -> None:
    with pytest.raises(TypeError, match="TTL must be a number of milliseconds"):
        milliseconds_to_seconds(ms=ms)


def test_milliseconds_to_seconds_rejects_negative() -> None:
    with pytest.raises(ValueError, match="must not be negative"):
        milliseconds_to_seconds(ms=-1)


def test_now_is_timezone_aware() -> None:
    assert now().tzinfo is not None
    assert now_plus(seconds=10) == IsDatetime(approx=now(), delta=15)
    assert now_plus(seconds=10) > now()
