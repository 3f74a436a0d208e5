import sys
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from kv_store_registry.utils.compound import compound_key, get_collections_from_compound_keys, get_keys_from_compound_keys
from kv_store_registry.utils.time_to_live import now, now_plus

try:
    from cachetools import TLRUCache
except ImportError as e:
    msg = "MemoryStore requires cachetools"
    raise ImportError(msg) from e

DEFAULT_COLLECTION = "default_collection"

DEFAULT_MAX_ENTRIES = 10000


@dataclass
class MemoryCacheEntry:
    """A cache entry for the memory store."""

    value: dict[str, Any]

    expires_at: datetime | None

    ttl_at_insert: float | None = field(default=None)

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False

        return self.expires_at <= now()


def _memory_cache_ttu(_key: Any, value: MemoryCacheEntry, now: float) -> float:
    """Calculate time-to-use for cache entries based on their TTL."""
    if value.ttl_at_insert is None:
        return float(sys.maxsize)

    return now + value.ttl_at_insert


def _memory_cache_getsizeof(value: MemoryCacheEntry) -> int:  # noqa: ARG001
    """Return size of cache entry (always 1 for entry counting)."""
    return 1


class MemoryStore:
    """In-memory key-value store using TLRU (Time-aware Least Recently Used) cache.

    Entries of every collection share one cache, keyed by `collection::key`.
    """

    max_entries: int

    _cache: MutableMapping[str, MemoryCacheEntry]

    def __init__(self, *, max_entries: int = DEFAULT_MAX_ENTRIES, cache: MutableMapping[str, Any] | None = None):
        """Initialize the in-memory store.

        Args:
            max_entries: The maximum number of entries to keep. Defaults to 10,000. Ignored when `cache` is given.
            cache: An existing mapping to store entries in instead of a fresh TLRU cache.
        """
        self.max_entries = max_entries

        if cache is not None:
            self._cache = cache
        else:
            self._cache = TLRUCache[str, MemoryCacheEntry](
                maxsize=max_entries,
                ttu=_memory_cache_ttu,
                getsizeof=_memory_cache_getsizeof,
            )

    async def get(self, key: str, *, collection: str | None = None) -> dict[str, Any] | None:
        combo_key: str = compound_key(collection=collection or DEFAULT_COLLECTION, key=key)

        cache_entry: MemoryCacheEntry | None = self._cache.get(combo_key)

        if cache_entry is None:
            return None

        if cache_entry.is_expired:
            _ = self._cache.pop(combo_key, None)
            return None

        return cache_entry.value

    async def put(self, key: str, value: dict[str, Any], *, collection: str | None = None, ttl: float | None = None) -> None:
        combo_key: str = compound_key(collection=collection or DEFAULT_COLLECTION, key=key)

        self._cache[combo_key] = MemoryCacheEntry(
            value=value,
            expires_at=now_plus(seconds=ttl) if ttl is not None else None,
            ttl_at_insert=ttl,
        )

    async def delete(self, key: str, *, collection: str | None = None) -> bool:
        combo_key: str = compound_key(collection=collection or DEFAULT_COLLECTION, key=key)
        return self._cache.pop(combo_key, None) is not None

    async def keys(self, *, collection: str | None = None) -> list[str]:
        return get_keys_from_compound_keys(compound_keys=list(self._cache), collection=collection or DEFAULT_COLLECTION)

    async def collections(self) -> list[str]:
        return get_collections_from_compound_keys(compound_keys=list(self._cache))

    async def destroy_collection(self, collection: str) -> bool:
        keys: list[str] = await self.keys(collection=collection)

        for key in keys:
            _ = await self.delete(key=key, collection=collection)

        return bool(keys)
