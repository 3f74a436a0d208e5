import pytest

import kv_store_registry
from kv_store_registry.context import (
    NO_INSTALL_ENV,
    StoreContext,
    clear_adapter_cache,
    default_context,
    default_loader,
    get_registry,
    register_adapter,
    reset_default_context,
)
from kv_store_registry.install import PipInstaller
from kv_store_registry.loader import AdapterLoader
from kv_store_registry.registry import DEFAULT_ADAPTERS, ProtocolRegistry
from kv_store_registry.types import AdapterDescriptor
from tests.fakes import FAKE_PACKAGE, FakeModuleSource, build_fake_module


def test_default_loader_installs_with_pip(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(NO_INSTALL_ENV)

    assert isinstance(default_loader().installer, PipInstaller)


@pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
def test_default_loader_respects_no_install(monkeypatch: pytest.MonkeyPatch, value: str):
    monkeypatch.setenv(NO_INSTALL_ENV, value)

    assert default_loader().installer is None


def test_default_loader_ignores_falsy_no_install(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(NO_INSTALL_ENV, "0")

    assert isinstance(default_loader().installer, PipInstaller)


def test_context_defaults():
    context = StoreContext()

    assert context.get_registry() == DEFAULT_ADAPTERS
    assert context.loader.installer is None


def test_contexts_are_isolated():
    first = StoreContext()
    second = StoreContext(registry=ProtocolRegistry(adapters={}))

    first.register_adapter("custom", AdapterDescriptor(package="my_company.kv"))

    assert "custom:" in first.get_registry()
    assert second.get_registry() == {}


def test_empty_registry_is_kept():
    registry = ProtocolRegistry(adapters={})
    loader = AdapterLoader()
    context = StoreContext(registry=registry, loader=loader)

    assert context.registry is registry
    assert context.loader is loader

    context.register_adapter("custom", AdapterDescriptor(package="my_company.kv"))

    assert registry.lookup("custom:") == AdapterDescriptor(package="my_company.kv")


def test_default_context_is_created_once():
    assert default_context() is default_context()


def test_reset_default_context():
    previous = default_context()
    replacement = StoreContext()

    assert reset_default_context(replacement) is replacement
    assert default_context() is replacement
    assert reset_default_context() is not previous


def test_register_adapter_and_get_registry():
    register_adapter("custom", {"package": "my_company.kv", "exportName": "CustomStore"})

    registry = get_registry()

    assert registry["custom:"] == AdapterDescriptor(package="my_company.kv", export_name="CustomStore")
    assert "custom:" not in StoreContext().get_registry()


def test_get_registry_is_a_copy():
    registry = get_registry()
    registry.clear()

    assert get_registry() == DEFAULT_ADAPTERS


async def test_clear_adapter_cache():
    source = FakeModuleSource(modules={FAKE_PACKAGE: build_fake_module()})
    context = reset_default_context(StoreContext(loader=AdapterLoader(source=source)))

    _ = await context.loader.load(FAKE_PACKAGE)
    assert context.loader.cache

    clear_adapter_cache()

    assert context.loader.cache == {}

    _ = await context.loader.load(FAKE_PACKAGE)
    assert source.loads == [FAKE_PACKAGE, FAKE_PACKAGE]


def test_public_api():
    assert kv_store_registry.create_store is not None
    assert kv_store_registry.register_adapter is register_adapter
    assert set(kv_store_registry.__all__) >= {"create_store", "register_adapter", "get_registry", "clear_adapter_cache"}
