from collections.abc import Callable
from typing import Any, TypeVar

from beartype import BeartypeConf, BeartypeStrategy, beartype

T = TypeVar("T", bound=Callable[..., Any])

enforce_bear_type_conf = BeartypeConf(strategy=BeartypeStrategy.O1)

enforce_bear_type = beartype(conf=enforce_bear_type_conf)


def bear_enforce(func: T) -> T:
    """Check argument and return types on every call."""
    return enforce_bear_type(func)
