from pathlib import Path
from types import ModuleType

import pytest

from kv_store_registry import context as context_module
from kv_store_registry.context import NO_INSTALL_ENV, StoreContext
from kv_store_registry.loader import AdapterLoader
from tests.fakes import FAKE_PACKAGE, FakeInstaller, FakeModuleSource, build_fake_module


@pytest.fixture(autouse=True)
def isolated_default_context(monkeypatch: pytest.MonkeyPatch) -> None:
    """Never let a test install anything or leak registrations through the process-wide context."""
    monkeypatch.setenv(NO_INSTALL_ENV, "1")
    monkeypatch.setattr(context_module, "_default_context", None)


@pytest.fixture
def home_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def cwd_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


@pytest.fixture
def fake_module() -> ModuleType:
    return build_fake_module()


@pytest.fixture
def module_source(fake_module: ModuleType) -> FakeModuleSource:
    """A source where the fake adapter package only becomes importable once installed."""
    return FakeModuleSource(installable={FAKE_PACKAGE: fake_module})


@pytest.fixture
def installer(module_source: FakeModuleSource) -> FakeInstaller:
    return FakeInstaller(source=module_source)


@pytest.fixture
def loader(module_source: FakeModuleSource, installer: FakeInstaller) -> AdapterLoader:
    return AdapterLoader(source=module_source, installer=installer)


@pytest.fixture
def context(loader: AdapterLoader) -> StoreContext:
    return StoreContext(loader=loader)
