"""
Plugin Host.

PluginHost wires the registry, catalog client, loader, installer and instance
tracker together and is the surface UI and automation code talk to.

Example usage:
    host = PluginHost(load_settings())
    host.start()
    for descriptor in await host.fetch_available():
        if not descriptor.installed:
            await host.install(descriptor)
    instance = host.instantiate("org_foo", 0, Placement(location=(200.0, 0.0, 0.0)))
    host.destroy(instance)
"""

import logging
from typing import Any, Callable

import httpx

from plugdock.config import Settings
from plugdock.plugin.catalog import CatalogClient
from plugdock.plugin.descriptor import PluginDescriptor
from plugdock.plugin.installer import CloneFunc, Installer, InstallResult
from plugdock.plugin.git_ops import clone_repository
from plugdock.plugin.instances import InstanceTracker, InstantiatedInstance
from plugdock.plugin.loader import InstalledPackage, PackageLoader
from plugdock.plugin.registry import Registry
from plugdock.plugin.validator import PackageValidator
from plugdock.scene import InMemoryScene, Placement, Scene

logger = logging.getLogger(__name__)


class PluginHost:
    """Entry point for everything plugdock does inside a host process."""

    def __init__(
        self,
        settings: Settings,
        scene: Scene | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clone: CloneFunc = clone_repository,
    ):
        """
        Initialize PluginHost.

        Args:
            settings: plugdock settings
            scene: Host scene, defaults to an InMemoryScene
            transport: Optional httpx transport for the catalog client
            clone: Clone coroutine, defaults to running git
        """
        self.settings = settings
        self.scene = scene if scene is not None else InMemoryScene()
        self.registry = Registry(settings.plugins_root)
        self.validator = PackageValidator(settings.entry_point)
        self.loader = PackageLoader(
            self.scene,
            entry_point=settings.entry_point,
            capabilities_attribute=settings.capabilities_attribute,
        )
        self.catalog = CatalogClient(settings, transport=transport)
        self.tracker = InstanceTracker(self.registry, self.scene)
        self.installer = Installer(
            settings,
            self.registry,
            self.loader,
            self.validator,
            self.tracker,
            clone=clone,
        )
        self._started = False

    def start(self) -> list[str]:
        """
        Scan the plugins root and load installed packages.

        Runs once; later calls return an empty list.
        """
        if self._started:
            return []
        self._started = True
        return self.registry.scan(self.loader, self.validator)

    async def fetch_available(
        self, alive: Callable[[], bool] | None = None
    ) -> list[PluginDescriptor]:
        """
        Refresh the available map from the catalog.

        Args:
            alive: Optional liveness check for the caller. If it returns False
                once the fetch completes, the result is dropped and the
                available map is left as it was.

        Returns:
            The fetched descriptors (empty if the catalog was unavailable)
        """
        descriptors = await self.catalog.fetch_list()
        if alive is not None and not alive():
            logger.debug("Catalog result discarded, caller is gone")
            return descriptors
        self.registry.set_available(descriptors)
        return descriptors

    def get_available(self) -> dict[str, PluginDescriptor]:
        return self.registry.get_available()

    def get_installed(self) -> dict[str, InstalledPackage]:
        return self.registry.get_installed()

    def get_instances(self) -> list[InstantiatedInstance]:
        return self.registry.get_instances()

    def find_available(self, slug: str) -> PluginDescriptor | None:
        return self.registry.get_available().get(slug)

    def local_descriptor(self, slug: str) -> PluginDescriptor:
        """Descriptor for a slug, from the catalog if listed there."""
        return self.find_available(slug) or PluginDescriptor.for_local(
            slug, self.settings.plugins_root
        )

    async def install(self, descriptor: PluginDescriptor) -> InstallResult:
        return await self.installer.install(descriptor)

    async def uninstall(self, descriptor: PluginDescriptor) -> None:
        await self.installer.uninstall(descriptor)

    def instantiate(
        self, slug: str, index: int, placement: Placement | None = None
    ) -> InstantiatedInstance | None:
        return self.tracker.instantiate(slug, index, placement)

    def destroy(self, ref: InstantiatedInstance | str) -> bool:
        return self.tracker.destroy(ref)

    def describe(self) -> dict[str, Any]:
        """Summary of the current state, for logging and the pm tool."""
        return {
            "plugins_root": str(self.settings.plugins_root),
            "available": sorted(self.registry.get_available()),
            "installed": {
                slug: [c.name for c in package.capabilities]
                for slug, package in sorted(self.registry.get_installed().items())
            },
            "instances": len(self.registry.get_instances()),
        }
