"""Parsing of connection URIs into store and adapter options."""

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import SplitResult, parse_qsl, urlsplit

from pydantic import BaseModel, ConfigDict, NonNegativeFloat, NonNegativeInt, ValidationError
from typing_extensions import Self

from kv_store_registry.errors import InvalidOptionsError, InvalidURIError

HOME_AUTHORITY = "~"
CWD_AUTHORITY = "."

_SCHEME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_INTEGER_PATTERN = re.compile(r"[0-9]+")
_FLOAT_PATTERN = re.compile(r"[0-9]+\.[0-9]+")


class StoreOptions(BaseModel):
    """Options accepted by `create_store`.

    Unknown keys are kept as extras and forwarded untouched to the store client and the adapter.
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True, coerce_numbers_to_str=True)

    store: Any | None = None
    """A pre-built adapter. When set, URI resolution is skipped entirely."""

    namespace: str | None = None
    """Logical key prefix, used as the adapter collection."""

    ttl: NonNegativeInt | NonNegativeFloat | None = None
    """Default expiry in milliseconds."""

    @classmethod
    def coerce(cls, options: "Mapping[str, Any] | StoreOptions | None") -> Self:
        if isinstance(options, cls):
            return options

        try:
            return cls.model_validate(dict(options or {}))
        except ValidationError as e:
            raise InvalidOptionsError(errors=str(e)) from e

    def to_mapping(self) -> dict[str, Any]:
        """Return only the options the caller actually supplied."""
        declared: dict[str, Any] = {name: getattr(self, name) for name in type(self).model_fields if name in self.model_fields_set}

        return {**declared, **(self.model_extra or {})}


def parse_uri(uri: str) -> SplitResult:
    """Split an absolute URI, raising InvalidURIError when it has no usable scheme."""
    scheme, separator, _ = uri.partition(":")

    if not separator or not _SCHEME_PATTERN.fullmatch(scheme):
        raise InvalidURIError(uri=uri)

    try:
        url: SplitResult = urlsplit(uri)
        _ = url.port
    except ValueError as e:
        raise InvalidURIError(uri=uri) from e

    return url


def convert_option_value(value: str) -> bool | int | float | str:
    if value == "true":
        return True
    if value == "false":
        return False
    if _INTEGER_PATTERN.fullmatch(value):
        return int(value)
    if _FLOAT_PATTERN.fullmatch(value):
        return float(value)
    return value


def parse_query_options(url: SplitResult) -> dict[str, Any]:
    """Turn the query string of a URL into an options mapping with auto-typed values.

    `true`/`false` become booleans, digit-only values become ints and `digits.digits` values become floats.
    When a key repeats, the last occurrence wins.
    """
    options: dict[str, Any] = {}

    for key, value in parse_qsl(url.query, keep_blank_values=True):
        options[key] = convert_option_value(value)

    return options


def resolve_path(url: SplitResult) -> str:
    """Resolve a filesystem-style URL to a concrete path and make sure its parent directory exists.

    `scheme://~/a/b` is rooted at the home directory, `scheme://./a/b` at the current working directory,
    anything else uses the URL path as-is.
    """
    file_path: Path

    if url.netloc == HOME_AUTHORITY:
        file_path = Path.home() / url.path.lstrip("/")
    elif url.netloc == CWD_AUTHORITY:
        file_path = Path.cwd() / url.path.lstrip("/")
    else:
        file_path = Path(url.path)

    file_path.parent.mkdir(parents=True, exist_ok=True)

    return str(file_path)


def merge_options(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge option layers in order, later layers winning on conflicting keys."""
    merged: dict[str, Any] = {}

    for layer in layers:
        if layer:
            merged.update(layer)

    return merged
