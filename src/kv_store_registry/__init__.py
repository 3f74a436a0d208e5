"""KV Store Registry - create key-value stores from connection URIs."""

from kv_store_registry.client import KeyValueStore
from kv_store_registry.context import (
    StoreContext,
    clear_adapter_cache,
    default_context,
    get_registry,
    register_adapter,
    reset_default_context,
)
from kv_store_registry.errors import (
    AdapterConstructionError,
    AdapterInstallError,
    AdapterLoadError,
    InvalidOptionsError,
    InvalidURIError,
    KVStoreRegistryError,
    PassthroughConstructionError,
    StoreConstructionError,
    UnknownProtocolError,
)
from kv_store_registry.factory import create_store
from kv_store_registry.install import ImportlibModuleSource, PipInstaller
from kv_store_registry.loader import AdapterLoader
from kv_store_registry.options import StoreOptions
from kv_store_registry.registry import ProtocolRegistry
from kv_store_registry.stores.memory import MemoryStore
from kv_store_registry.types import AdapterDescriptor, KeyValueAdapter
from kv_store_registry.worker import resolve_store

__all__ = [
    "AdapterConstructionError",
    "AdapterDescriptor",
    "AdapterInstallError",
    "AdapterLoadError",
    "AdapterLoader",
    "ImportlibModuleSource",
    "InvalidOptionsError",
    "InvalidURIError",
    "KVStoreRegistryError",
    "KeyValueAdapter",
    "KeyValueStore",
    "MemoryStore",
    "PassthroughConstructionError",
    "PipInstaller",
    "ProtocolRegistry",
    "StoreConstructionError",
    "StoreContext",
    "StoreOptions",
    "UnknownProtocolError",
    "clear_adapter_cache",
    "create_store",
    "default_context",
    "get_registry",
    "register_adapter",
    "reset_default_context",
    "resolve_store",
]
