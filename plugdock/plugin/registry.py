"""
Package Registry.

The registry is the single owner of plugdock's state:

- available: slug -> PluginDescriptor, refreshed from the catalog
- installed: slug -> InstalledPackage, populated by the startup scan and installs
- instances: ordered list of InstantiatedInstance

The available map may lag behind the installed map; they are refreshed
independently. Only the Installer and InstanceTracker call the mutators.
"""

import logging
from pathlib import Path

from plugdock.errors import LoadError
from plugdock.plugin.descriptor import PluginDescriptor
from plugdock.plugin.instances import InstantiatedInstance
from plugdock.plugin.loader import InstalledPackage, PackageLoader
from plugdock.plugin.validator import PackageValidator

logger = logging.getLogger(__name__)


class Registry:
    """Available, installed and instantiated state for one host process."""

    def __init__(self, plugins_root: Path):
        """
        Initialize Registry.

        Args:
            plugins_root: Directory holding installed packages
        """
        self.plugins_root = plugins_root
        self._available: dict[str, PluginDescriptor] = {}
        self._installed: dict[str, InstalledPackage] = {}
        self._instances: list[InstantiatedInstance] = []

    def scan(self, loader: PackageLoader, validator: PackageValidator) -> list[str]:
        """
        Load every valid package found under the plugins root.

        Invalid directories and packages that fail to load are logged and
        skipped.

        Returns:
            Slugs that were loaded, in directory order
        """
        self.plugins_root.mkdir(parents=True, exist_ok=True)
        loaded = []

        for entry in sorted(self.plugins_root.iterdir()):
            if not entry.is_dir():
                continue

            if not validator.is_valid(entry):
                logger.warning(f"Skipping {entry.name}: not a valid package")
                continue

            try:
                package = loader.load(entry, entry.name)
            except LoadError as e:
                logger.error(f"Skipping {entry.name}: {e}")
                continue

            self._installed[package.slug] = package
            loaded.append(package.slug)

        logger.info(f"Startup scan loaded {len(loaded)} package(s)")
        return loaded

    # Read accessors

    def get_available(self) -> dict[str, PluginDescriptor]:
        return dict(self._available)

    def get_installed(self) -> dict[str, InstalledPackage]:
        return dict(self._installed)

    def get_package(self, slug: str) -> InstalledPackage | None:
        return self._installed.get(slug)

    def is_installed(self, slug: str) -> bool:
        return slug in self._installed

    def get_instances(self) -> list[InstantiatedInstance]:
        return list(self._instances)

    # Mutators

    def set_available(self, descriptors: list[PluginDescriptor]) -> None:
        """Replace the available map with a fresh catalog listing."""
        self._available = {d.slug: d for d in descriptors}

    def add_installed(self, package: InstalledPackage) -> None:
        self._installed[package.slug] = package

    def remove_installed(self, slug: str) -> InstalledPackage | None:
        return self._installed.pop(slug, None)

    def append_instance(self, instance: InstantiatedInstance) -> None:
        self._instances.append(instance)

    def remove_instance(self, instance_id: str) -> InstantiatedInstance | None:
        """Remove and return the first instance with this id."""
        for i, instance in enumerate(self._instances):
            if instance.instance_id == instance_id:
                return self._instances.pop(i)
        return None

    def pop_instances(self, slug: str) -> list[InstantiatedInstance]:
        """Remove and return every instance of a package, in order."""
        popped = [i for i in self._instances if i.slug == slug]
        self._instances = [i for i in self._instances if i.slug != slug]
        return popped
