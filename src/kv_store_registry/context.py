"""The registry and loader a resolution runs against."""

import os
from collections.abc import Mapping
from typing import Any

from kv_store_registry.install import PipInstaller
from kv_store_registry.loader import AdapterLoader
from kv_store_registry.registry import ProtocolRegistry
from kv_store_registry.types import AdapterDescriptor

NO_INSTALL_ENV = "KV_STORE_REGISTRY_NO_INSTALL"

_TRUTHY = {"1", "true", "yes", "on"}


def default_loader() -> AdapterLoader:
    """Build a loader that installs missing adapters with pip, unless KV_STORE_REGISTRY_NO_INSTALL is set."""
    if os.environ.get(NO_INSTALL_ENV, "").strip().lower() in _TRUTHY:
        return AdapterLoader()

    return AdapterLoader(installer=PipInstaller())


class StoreContext:
    """Owns one protocol registry and one adapter loader.

    Pass a context to `create_store` to isolate registrations and cached adapters, e.g. between test suites.
    """

    registry: ProtocolRegistry
    loader: AdapterLoader

    def __init__(self, *, registry: ProtocolRegistry | None = None, loader: AdapterLoader | None = None) -> None:
        self.registry = registry if registry is not None else ProtocolRegistry()
        self.loader = loader if loader is not None else default_loader()

    def register_adapter(self, scheme: str, descriptor: AdapterDescriptor | Mapping[str, Any]) -> None:
        self.registry.register(scheme, descriptor)

    def get_registry(self) -> dict[str, AdapterDescriptor]:
        return self.registry.snapshot()

    def clear_adapter_cache(self) -> None:
        self.loader.clear()


_default_context: StoreContext | None = None


def default_context() -> StoreContext:
    """Return the process-wide context, creating it on first use."""
    global _default_context  # noqa: PLW0603

    if _default_context is None:
        _default_context = StoreContext()

    return _default_context


def reset_default_context(context: StoreContext | None = None) -> StoreContext:
    """Replace the process-wide context, returning the new one."""
    global _default_context  # noqa: PLW0603

    _default_context = context if context is not None else StoreContext()

    return _default_context


def register_adapter(scheme: str, descriptor: AdapterDescriptor | Mapping[str, Any]) -> None:
    """Register or override the adapter for a scheme in the default context."""
    default_context().register_adapter(scheme, descriptor)


def get_registry() -> dict[str, AdapterDescriptor]:
    """Return a copy of the default context's registry."""
    return default_context().get_registry()


def clear_adapter_cache() -> None:
    """Forget every adapter loaded by the default context."""
    default_context().clear_adapter_cache()
