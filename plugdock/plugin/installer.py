"""
Package Installer.

This module orchestrates install and uninstall.

Install: clone -> validate -> load -> register. A failed install may leave a
partial directory behind; retrying re-clones and re-validates.

Uninstall: delete directory -> unregister -> destroy live instances. If the
directory is missing or cannot be deleted, nothing in the registry changes.

Callers serialize operations on the same slug.
"""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from typing import Awaitable, Callable

from plugdock.config import Settings
from plugdock.errors import GitError, InstallError, LoadError, UninstallError
from plugdock.plugin.descriptor import PluginDescriptor
from plugdock.plugin.git_ops import clone_repository
from plugdock.plugin.instances import InstanceTracker
from plugdock.plugin.loader import PackageLoader
from plugdock.plugin.registry import Registry
from plugdock.plugin.validator import PackageValidator

logger = logging.getLogger(__name__)

# (source_url, directory_name, cwd, git_executable) -> exit code
CloneFunc = Callable[..., Awaitable[int]]


@dataclass(frozen=True)
class InstallResult:
    """Outcome of a successful install."""

    exit_code: int
    descriptor: PluginDescriptor


class Installer:
    """Install and uninstall packages."""

    def __init__(
        self,
        settings: Settings,
        registry: Registry,
        loader: PackageLoader,
        validator: PackageValidator,
        tracker: InstanceTracker,
        clone: CloneFunc = clone_repository,
    ):
        self.settings = settings
        self.registry = registry
        self.loader = loader
        self.validator = validator
        self.tracker = tracker
        self._clone = clone

    async def install(self, descriptor: PluginDescriptor) -> InstallResult:
        """
        Clone, validate, load and register a package.

        Args:
            descriptor: Package to install

        Returns:
            InstallResult with the clone exit code and the descriptor

        Raises:
            InstallError: If git fails, or the cloned tree is invalid or fails
                to load. Carries the exit code and the descriptor.
        """
        root = self.settings.plugins_root
        root.mkdir(parents=True, exist_ok=True)

        logger.info(f"Installing {descriptor.slug} from {descriptor.source_url}")
        try:
            exit_code = await self._clone(
                descriptor.source_url,
                descriptor.slug,
                root,
                self.settings.git_executable,
            )
        except GitError as e:
            raise InstallError(descriptor, None, str(e)) from e

        if exit_code != 0:
            raise InstallError(descriptor, exit_code, f"git clone exited with {exit_code}")

        if not self.validator.is_valid(descriptor.local_path):
            raise InstallError(
                descriptor,
                exit_code,
                f"{descriptor.local_path} has no {self.validator.entry_point}",
            )

        try:
            package = self.loader.load(descriptor.local_path, descriptor.slug)
        except LoadError as e:
            raise InstallError(descriptor, exit_code, str(e)) from e

        self.registry.add_installed(package)
        logger.info(f"Installed {descriptor.slug}")
        return InstallResult(exit_code=exit_code, descriptor=descriptor)

    async def uninstall(self, descriptor: PluginDescriptor) -> None:
        """
        Delete a package and purge it from the registry.

        Args:
            descriptor: Package to uninstall

        Raises:
            UninstallError: If the directory does not exist or cannot be
                deleted. The registry is left untouched.
        """
        path = descriptor.local_path
        if not path.is_dir():
            raise UninstallError(descriptor, f"{path} does not exist")

        try:
            await asyncio.to_thread(shutil.rmtree, path)
        except OSError as e:
            raise UninstallError(descriptor, f"Failed to delete {path}: {e}") from e

        self.registry.remove_installed(descriptor.slug)
        self.loader.unload(descriptor.slug)
        destroyed = self.tracker.destroy_all(descriptor.slug)
        logger.info(f"Uninstalled {descriptor.slug} ({destroyed} instance(s) destroyed)")
