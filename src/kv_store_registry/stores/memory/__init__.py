"""Built-in in-memory store."""

from kv_store_registry.stores.memory.store import MemoryStore

__all__ = ["MemoryStore"]
