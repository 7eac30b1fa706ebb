"""
Instance Tracking.

Creates scene objects from installed packages' capabilities and remembers
which package and capability each object came from, so the objects can be
destroyed individually or all together when their package is uninstalled.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from plugdock.scene import Placement, Scene

if TYPE_CHECKING:
    from plugdock.plugin.registry import Registry

logger = logging.getLogger(__name__)


@dataclass
class InstantiatedInstance:
    """
    A live scene object created from a package capability.

    Attributes:
        slug: Owning package
        capability_index: Index into the package's capabilities
        handle: Opaque scene object
        instance_id: Identifier used to find the instance again
    """

    slug: str
    capability_index: int
    handle: Any
    instance_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def metadata(self) -> dict[str, Any]:
        return {"slug": self.slug, "capability_index": self.capability_index}


class InstanceTracker:
    """Instantiates and destroys package objects in the host scene."""

    def __init__(self, registry: "Registry", scene: Scene):
        self.registry = registry
        self.scene = scene

    def instantiate(
        self, slug: str, capability_index: int, placement: Placement | None = None
    ) -> InstantiatedInstance | None:
        """
        Create an object from an installed package's capability.

        Args:
            slug: Installed package slug
            capability_index: Index into the package's capabilities
            placement: Where to spawn the object

        Returns:
            The tracked instance, or None if the slug is not installed, the
            index is out of range, or the factory raised
        """
        package = self.registry.get_package(slug)
        if package is None:
            logger.warning(f"Cannot instantiate: {slug} is not installed")
            return None

        if not 0 <= capability_index < len(package.capabilities):
            logger.warning(
                f"Cannot instantiate: {slug} has no capability {capability_index}"
            )
            return None

        capability = package.capabilities[capability_index]
        try:
            handle = self.scene.instantiate(capability.factory, placement or Placement())
        except Exception:
            logger.exception(f"Cannot instantiate: {slug} capability {capability_index} raised")
            return None

        instance = InstantiatedInstance(
            slug=slug, capability_index=capability_index, handle=handle
        )
        self.registry.append_instance(instance)
        return instance

    def destroy(self, ref: InstantiatedInstance | str) -> bool:
        """
        Destroy a tracked instance.

        The instance leaves the registry before its teardown hook and the
        scene's destroy run, so a re-entrant destroy finds nothing.

        Args:
            ref: The instance or its instance_id

        Returns:
            True if an instance was found and destroyed
        """
        instance_id = ref.instance_id if isinstance(ref, InstantiatedInstance) else ref
        instance = self.registry.remove_instance(instance_id)
        if instance is None:
            logger.debug(f"Destroy ignored, unknown instance {instance_id}")
            return False

        self._tear_down(instance)
        self.scene.destroy(instance.handle)
        return True

    def destroy_all(self, slug: str) -> int:
        """
        Destroy every instance created from a package.

        All of the package's instances leave the registry first. A failing
        teardown or scene destroy is logged and the rest are still destroyed.

        Returns:
            Number of instances the scene destroyed without error
        """
        count = 0
        for instance in self.registry.pop_instances(slug):
            self._tear_down(instance)
            try:
                self.scene.destroy(instance.handle)
            except Exception:
                logger.exception(f"Scene failed to destroy {slug} instance {instance.instance_id}")
                continue
            count += 1
        return count

    def _tear_down(self, instance: InstantiatedInstance) -> None:
        teardown = getattr(instance.handle, "teardown", None)
        if callable(teardown):
            try:
                teardown()
            except Exception:
                logger.exception(f"Teardown of {instance.slug} instance raised")
