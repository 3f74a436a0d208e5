"""Capabilities used by the adapter loader to import and install adapter packages."""

import asyncio
import importlib
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path
from types import ModuleType
from typing import Protocol, runtime_checkable

from kv_store_registry.errors import AdapterInstallError

logger = logging.getLogger(__name__)

INSTALL_DIR_ENV = "KV_STORE_REGISTRY_INSTALL_DIR"

STDERR_TAIL_CHARS = 2000


@runtime_checkable
class ModuleSource(Protocol):
    """Loads modules from the local module graph."""

    def try_load(self, name: str) -> ModuleType | None:
        """Import a module by name, returning None when it is not importable."""
        ...

    def refresh(self) -> None:
        """Forget cached lookups so freshly installed modules become visible."""
        ...


@runtime_checkable
class Installer(Protocol):
    """Installs the distribution that provides a missing adapter."""

    async def install(self, requirement: str) -> None:
        """Install a requirement, raising on failure."""
        ...


class ImportlibModuleSource:
    """Loads modules with importlib."""

    def try_load(self, name: str) -> ModuleType | None:
        try:
            return importlib.import_module(name)
        except ImportError:
            logger.debug("Module is not importable", extra={"module": name}, exc_info=True)
            return None

    def refresh(self) -> None:
        importlib.invalidate_caches()


class PipInstaller:
    """Installs requirements with pip in a subprocess of the running interpreter."""

    target_dir: Path | None
    pip_args: tuple[str, ...]
    python: str

    def __init__(self, *, target_dir: Path | str | None = None, pip_args: Sequence[str] = (), python: str | None = None) -> None:
        """Initialize the installer.

        Args:
            target_dir: Directory to install into (`pip install --target`). Defaults to the
                KV_STORE_REGISTRY_INSTALL_DIR environment variable, or the running environment when unset.
            pip_args: Extra arguments passed to `pip install`.
            python: The interpreter to run pip with. Defaults to the running interpreter.
        """
        if target_dir is None and (env_target_dir := os.environ.get(INSTALL_DIR_ENV)):
            target_dir = env_target_dir

        self.target_dir = Path(target_dir).expanduser() if target_dir is not None else None
        self.pip_args = tuple(pip_args)
        self.python = python or sys.executable

    def command(self, requirement: str) -> list[str]:
        command: list[str] = [self.python, "-m", "pip", "install", "--disable-pip-version-check"]

        if self.target_dir is not None:
            command.extend(["--target", str(self.target_dir)])

        command.extend(self.pip_args)
        command.append(requirement)

        return command

    async def install(self, requirement: str) -> None:
        if self.target_dir is not None:
            self.target_dir.mkdir(parents=True, exist_ok=True)

        logger.info("Installing adapter requirement", extra={"requirement": requirement, "target_dir": self.target_dir})

        try:
            process = await asyncio.create_subprocess_exec(
                *self.command(requirement=requirement),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise AdapterInstallError(requirement=requirement, stderr=str(e)) from e

        _, stderr = await process.communicate()

        if process.returncode != 0:
            stderr_text = stderr.decode(errors="replace")[-STDERR_TAIL_CHARS:]
            logger.warning(
                "Adapter installation failed",
                extra={"requirement": requirement, "returncode": process.returncode},
            )
            raise AdapterInstallError(requirement=requirement, returncode=process.returncode, stderr=stderr_text)

        if self.target_dir is not None and str(self.target_dir) not in sys.path:
            sys.path.insert(0, str(self.target_dir))

        logger.info("Installed adapter requirement", extra={"requirement": requirement})
