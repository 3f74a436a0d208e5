from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, runtime_checkable
from urllib.parse import SplitResult

from typing_extensions import Self

InstantiationMode = Literal["string", "options"]

OptionsMapper = Callable[[SplitResult], Mapping[str, Any]]

_DESCRIPTOR_ALIASES: dict[str, str] = {
    "exportName": "export_name",
    "optionsMapper": "options_mapper",
}


@dataclass(frozen=True)
class AdapterDescriptor:
    """Describes how to obtain and construct the adapter for one URI scheme."""

    package: str | None
    """Importable module path of the adapter, or None for the built-in memory backend."""

    export_name: str | None = None
    """Attribute of the module holding the adapter class. Defaults to the module's `Store` attribute."""

    mode: InstantiationMode | None = None
    """`string` calls `Adapter(uri, **options)`; `options` (or None) calls `Adapter(**options)`."""

    options_mapper: OptionsMapper | None = field(default=None, compare=False)
    """Derives extra adapter options from the parsed URL."""

    requirement: str | None = None
    """Requirement passed to the installer when the module is missing. Defaults to `package`."""

    @property
    def is_builtin(self) -> bool:
        return self.package is None

    @property
    def install_requirement(self) -> str | None:
        return self.requirement or self.package

    def map_options(self, url: SplitResult) -> dict[str, Any]:
        if self.options_mapper is None:
            return {}

        return dict(self.options_mapper(url))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        """Build a descriptor from a plain mapping, accepting camelCase field names."""
        fields: dict[str, Any] = {_DESCRIPTOR_ALIASES.get(name, name): value for name, value in data.items()}

        return cls(**fields)


@runtime_checkable
class KeyValueAdapter(Protocol):
    """The collection-aware async interface a backend adapter must provide."""

    async def get(self, key: str, *, collection: str | None = None) -> dict[str, Any] | None:
        """Retrieve a value by key from the specified collection."""
        ...

    async def put(self, key: str, value: dict[str, Any], *, collection: str | None = None, ttl: float | None = None) -> None:
        """Store a key-value pair in the specified collection with an optional TTL in seconds."""
        ...

    async def delete(self, key: str, *, collection: str | None = None) -> bool:
        """Delete a key from the specified collection, returning True if it existed."""
        ...
