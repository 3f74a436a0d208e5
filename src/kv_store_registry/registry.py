"""Registry mapping URI schemes to adapter descriptors."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import SplitResult

from kv_store_registry.options import resolve_path
from kv_store_registry.type_checking import bear_enforce
from kv_store_registry.types import AdapterDescriptor

DEFAULT_REDIS_PORT = 6379
DEFAULT_MEMCACHED_HOST = "127.0.0.1"
DEFAULT_MEMCACHED_PORT = 11211
DEFAULT_ELASTICSEARCH_PORT = 9200


def normalize_scheme(scheme: str) -> str:
    """Return the registry key for a scheme, e.g. `redis` -> `redis:`."""
    return scheme if scheme.endswith(":") else f"{scheme}:"


def url_option(url: SplitResult) -> dict[str, Any]:
    """Pass the full connection URL, query string included, as the `url` option."""
    return {"url": url.geturl()}


def host_port_options(url: SplitResult) -> dict[str, Any]:
    return {
        "host": url.hostname or DEFAULT_MEMCACHED_HOST,
        "port": url.port or DEFAULT_MEMCACHED_PORT,
    }


def elasticsearch_url_option(url: SplitResult) -> dict[str, Any]:
    """Rewrite `elasticsearch://host:port` into the http(s) URL the client expects."""
    http_scheme = "https" if url.scheme.endswith("+https") else "http"
    return {"url": f"{http_scheme}://{url.hostname or 'localhost'}:{url.port or DEFAULT_ELASTICSEARCH_PORT}"}


def sqlite_path_option(url: SplitResult) -> dict[str, Any]:
    return {"path": resolve_path(url)}


def duckdb_path_option(url: SplitResult) -> dict[str, Any]:
    return {"database_path": resolve_path(url)}


def directory_option(url: SplitResult) -> dict[str, Any]:
    return {"directory": resolve_path(url)}


REDIS_ADAPTER = AdapterDescriptor(
    package="key_value.aio.stores.redis",
    export_name="RedisStore",
    options_mapper=url_option,
    requirement="py-key-value-aio[redis]",
)

POSTGRESQL_ADAPTER = AdapterDescriptor(
    package="key_value.aio.stores.postgresql",
    export_name="PostgreSQLStore",
    options_mapper=url_option,
    requirement="py-key-value-aio[postgresql]",
)

MONGODB_ADAPTER = AdapterDescriptor(
    package="key_value.aio.stores.mongodb",
    export_name="MongoDBStore",
    options_mapper=url_option,
    requirement="py-key-value-aio[mongodb]",
)

ELASTICSEARCH_ADAPTER = AdapterDescriptor(
    package="key_value.aio.stores.elasticsearch",
    export_name="ElasticsearchStore",
    options_mapper=elasticsearch_url_option,
    requirement="py-key-value-aio[elasticsearch]",
)

MEMCACHED_ADAPTER = AdapterDescriptor(
    package="key_value.aio.stores.memcached",
    export_name="MemcachedStore",
    options_mapper=host_port_options,
    requirement="py-key-value-aio[memcached]",
)

SQLITE_ADAPTER = AdapterDescriptor(
    package="key_value.aio.stores.sqlite",
    export_name="SQLiteStore",
    options_mapper=sqlite_path_option,
    requirement="py-key-value-aio[sqlite]",
)

DUCKDB_ADAPTER = AdapterDescriptor(
    package="key_value.aio.stores.duckdb",
    export_name="DuckDBStore",
    options_mapper=duckdb_path_option,
    requirement="py-key-value-aio[duckdb]",
)

DISK_ADAPTER = AdapterDescriptor(
    package="key_value.aio.stores.disk",
    export_name="DiskStore",
    options_mapper=directory_option,
    requirement="py-key-value-aio[disk]",
)

MEMORY_ADAPTER = AdapterDescriptor(package=None)

DEFAULT_ADAPTERS: dict[str, AdapterDescriptor] = {
    "redis:": REDIS_ADAPTER,
    "rediss:": REDIS_ADAPTER,
    "postgresql:": POSTGRESQL_ADAPTER,
    "postgres:": POSTGRESQL_ADAPTER,
    "mongodb:": MONGODB_ADAPTER,
    "mongodb+srv:": MONGODB_ADAPTER,
    "elasticsearch:": ELASTICSEARCH_ADAPTER,
    "elasticsearch+https:": ELASTICSEARCH_ADAPTER,
    "memcache:": MEMCACHED_ADAPTER,
    "memcached:": MEMCACHED_ADAPTER,
    "sqlite:": SQLITE_ADAPTER,
    "duckdb:": DUCKDB_ADAPTER,
    "file:": DISK_ADAPTER,
    "memory:": MEMORY_ADAPTER,
}


class ProtocolRegistry:
    """A mutable mapping of URI schemes to the adapters that serve them.

    Keys always end in `:`. Registrations overwrite unconditionally, last write wins.
    """

    _adapters: dict[str, AdapterDescriptor]

    def __init__(self, adapters: Mapping[str, AdapterDescriptor] | None = None) -> None:
        """Initialize the registry.

        Args:
            adapters: The initial scheme to descriptor mapping. Defaults to DEFAULT_ADAPTERS.
        """
        self._adapters = {}

        for scheme, descriptor in (DEFAULT_ADAPTERS if adapters is None else adapters).items():
            self._adapters[normalize_scheme(scheme)] = descriptor

    @bear_enforce
    def register(self, scheme: str, descriptor: AdapterDescriptor | Mapping[str, Any]) -> None:
        """Register or override the adapter for a scheme.

        Args:
            scheme: The URI scheme, with or without the trailing colon.
            descriptor: An AdapterDescriptor, or a mapping of its fields.
        """
        if not isinstance(descriptor, AdapterDescriptor):
            descriptor = AdapterDescriptor.from_mapping(descriptor)

        self._adapters[normalize_scheme(scheme)] = descriptor

    def unregister(self, scheme: str) -> bool:
        return self._adapters.pop(normalize_scheme(scheme), None) is not None

    def lookup(self, scheme: str) -> AdapterDescriptor | None:
        return self._adapters.get(normalize_scheme(scheme))

    def snapshot(self) -> dict[str, AdapterDescriptor]:
        """Return a shallow copy of the registry; mutating it does not affect the registry."""
        return dict(self._adapters)

    def __contains__(self, scheme: object) -> bool:
        return isinstance(scheme, str) and normalize_scheme(scheme) in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)
