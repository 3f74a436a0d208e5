from collections.abc import MutableMapping
from typing import Any, SupportsFloat

from typing_extensions import Self

from kv_store_registry.options import StoreOptions
from kv_store_registry.stores.memory.store import MemoryStore
from kv_store_registry.types import KeyValueAdapter
from kv_store_registry.utils.time_to_live import milliseconds_to_seconds

DEFAULT_NAMESPACE = "keyv"

VALUE_FIELD = "value"


def as_adapter(store: Any) -> KeyValueAdapter:
    """Return `store` as an adapter, wrapping plain mutable mappings in a MemoryStore."""
    if store is None:
        return MemoryStore()

    if isinstance(store, KeyValueAdapter):
        return store

    if isinstance(store, MutableMapping):
        return MemoryStore(cache=store)

    msg = f"Store of type {type(store).__name__} is neither a key-value adapter nor a mutable mapping"
    raise TypeError(msg)


class KeyValueStore:
    """A namespaced async key-value client over a backend adapter.

    The namespace is used as the adapter collection, so two clients with different namespaces never see each
    other's keys. TTLs are given in milliseconds.
    """

    store: KeyValueAdapter
    namespace: str
    ttl: SupportsFloat | None
    options: dict[str, Any]

    def __init__(self, *, store: Any = None, namespace: str | None = None, ttl: SupportsFloat | None = None, **options: Any) -> None:
        """Initialize the client.

        Args:
            store: The adapter to wrap. A mutable mapping is wrapped in a MemoryStore; None creates a new MemoryStore.
            namespace: The namespace keys live in. Defaults to "keyv".
            ttl: The default expiry in milliseconds for `set`. None or 0 never expires.
            options: Additional options, kept untouched on `options`.
        """
        self.store = as_adapter(store)
        self.namespace = DEFAULT_NAMESPACE if namespace is None else str(namespace)
        self.ttl = ttl
        self.options = options

        self._default_ttl_seconds: float | None = milliseconds_to_seconds(ms=ttl)

    @classmethod
    def from_options(cls, options: StoreOptions) -> Self:
        return cls(**options.to_mapping())

    async def get(self, key: str, default: Any = None) -> Any:
        entry: dict[str, Any] | None = await self.store.get(key=key, collection=self.namespace)

        if entry is None or VALUE_FIELD not in entry:
            return default

        return entry[VALUE_FIELD]

    async def set(self, key: str, value: Any, ttl: SupportsFloat | None = None) -> bool:
        """Store a value, expiring after `ttl` milliseconds (or the client's default TTL)."""
        seconds: float | None = self._default_ttl_seconds if ttl is None else milliseconds_to_seconds(ms=ttl)

        await self.store.put(key=key, value={VALUE_FIELD: value}, collection=self.namespace, ttl=seconds)

        return True

    async def delete(self, key: str) -> bool:
        return await self.store.delete(key=key, collection=self.namespace)

    async def has(self, key: str) -> bool:
        return await self.store.get(key=key, collection=self.namespace) is not None

    async def clear(self) -> None:
        """Remove every key in this client's namespace."""
        destroy_collection = getattr(self.store, "destroy_collection", None)

        if destroy_collection is None:
            msg = f"Store of type {type(self.store).__name__} does not support clearing a namespace"
            raise NotImplementedError(msg)

        _ = await destroy_collection(collection=self.namespace)
