"""Loading of adapter classes, installing their packages on demand."""

import logging
from types import ModuleType
from typing import Any

from kv_store_registry.errors import AdapterLoadError
from kv_store_registry.install import ImportlibModuleSource, Installer, ModuleSource

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "Store"

DEFAULT_CACHE_KEY = "default"

AdapterCacheKey = tuple[str, str]


def select_export(module: ModuleType, export_name: str | None) -> Any:
    """Pick the adapter constructor out of a loaded module.

    A named export must exist. Without one, the module's `Store` attribute is used, falling back to the module itself.
    """
    if export_name is None:
        return getattr(module, DEFAULT_EXPORT_NAME, module)

    try:
        return getattr(module, export_name)
    except AttributeError as e:
        raise AdapterLoadError(package=module.__name__, export_name=export_name, reason=f"module has no attribute {export_name}") from e


class AdapterLoader:
    """Resolves adapter constructors by module name and export, memoizing successful loads.

    When a module cannot be imported and an installer is configured, the requirement is installed and the import is
    retried exactly once. Failed loads are never cached.
    """

    source: ModuleSource
    installer: Installer | None

    _cache: dict[AdapterCacheKey, Any]

    def __init__(
        self,
        *,
        source: ModuleSource | None = None,
        installer: Installer | None = None,
        cache: dict[AdapterCacheKey, Any] | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            source: Where modules are imported from. Defaults to importlib.
            installer: Installs missing requirements. When None, missing modules fail immediately.
            cache: An existing adapter cache to share.
        """
        self.source = source or ImportlibModuleSource()
        self.installer = installer
        self._cache = cache if cache is not None else {}

    @property
    def cache(self) -> dict[AdapterCacheKey, Any]:
        return self._cache

    def clear(self) -> None:
        """Forget every loaded adapter."""
        self._cache.clear()

    async def load(self, package: str, export_name: str | None = None, *, requirement: str | None = None) -> Any:
        """Return the adapter constructor exported by `package`.

        Args:
            package: The importable module path.
            export_name: The attribute holding the constructor. Defaults to the module's `Store` attribute.
            requirement: What to install when the module is missing. Defaults to `package`.

        Raises:
            AdapterLoadError: If the module is missing and cannot be installed, raises while importing, or lacks the named export.
        """
        cache_key: AdapterCacheKey = (package, export_name or DEFAULT_CACHE_KEY)

        if cache_key in self._cache:
            logger.debug("Adapter cache hit", extra={"package": package, "export_name": export_name})
            return self._cache[cache_key]

        module: ModuleType | None = self._try_load(package=package, export_name=export_name)

        if module is None:
            module = await self._install_and_retry(package=package, export_name=export_name, requirement=requirement or package)

        adapter = select_export(module=module, export_name=export_name)

        self._cache[cache_key] = adapter

        return adapter

    def _try_load(self, package: str, export_name: str | None) -> ModuleType | None:
        """Import `package`, returning None when it is missing. Errors raised while it executes become AdapterLoadError."""
        try:
            return self.source.try_load(package)
        except Exception as e:
            logger.warning("Adapter module failed to import", extra={"package": package, "error": repr(e)})
            raise AdapterLoadError(package=package, export_name=export_name, reason=f"importing {package} failed: {e}") from e

    async def _install_and_retry(self, package: str, export_name: str | None, requirement: str) -> ModuleType:
        if self.installer is None:
            raise AdapterLoadError(package=package, export_name=export_name, reason="module not found and installation is disabled")

        try:
            await self.installer.install(requirement)
        except Exception as e:
            raise AdapterLoadError(package=package, export_name=export_name, reason=f"installing {requirement} failed") from e

        self.source.refresh()

        module: ModuleType | None = self._try_load(package=package, export_name=export_name)

        if module is None:
            raise AdapterLoadError(package=package, export_name=export_name, reason=f"module not importable after installing {requirement}")

        return module
