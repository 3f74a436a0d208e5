from datetime import datetime, timedelta, timezone
from numbers import Real
from typing import SupportsFloat


def now() -> datetime:
    """Get the current time as a datetime object."""
    return datetime.now(tz=timezone.utc)


def now_plus(seconds: float) -> datetime:
    """Get the current time plus a number of seconds as a datetime object."""
    return now() + timedelta(seconds=seconds)


def milliseconds_to_seconds(ms: SupportsFloat | None) -> float | None:
    """Convert a millisecond TTL to the seconds adapters expect.

    A TTL of None or 0 means the entry never expires. Booleans are rejected so that `ttl=True` does not
    silently become a one millisecond expiry.
    """
    if ms is None:
        return None

    if not isinstance(ms, Real | SupportsFloat) or isinstance(ms, bool):
        msg = f"TTL must be a number of milliseconds, got {type(ms).__name__}"
        raise TypeError(msg)

    milliseconds = float(ms)

    if milliseconds < 0:
        msg = f"TTL must not be negative, got {milliseconds}"
        raise ValueError(msg)

    if milliseconds == 0:
        return None

    return milliseconds / 1000
