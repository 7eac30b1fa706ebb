"""
Host Scene Interface.

plugdock never creates scene objects itself. It talks to the host through the
Scene protocol below:

- register_factory: make an exported factory instantiable by the host
- instantiate: create a live object from a factory at a placement
- destroy: remove a live object from the scene

InMemoryScene is a complete implementation that keeps live objects in a list.
It backs the pm tool and the test suite, and is a reasonable default for hosts
without a spatial scene.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """
    Where a new scene object is spawned.

    Attributes:
        location: (x, y, z) world position
        rotation: (pitch, yaw, roll) in degrees
    """

    location: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: tuple[float, float, float] = (0.0, 0.0, 0.0)


class Scene(Protocol):
    """Capabilities plugdock needs from the host scene."""

    def register_factory(self, factory: Callable[..., Any]) -> Callable[..., Any]: ...

    def instantiate(self, factory: Callable[..., Any], placement: Placement) -> Any: ...

    def destroy(self, handle: Any) -> None: ...


class InMemoryScene:
    """Scene that calls factories directly and tracks the objects they return."""

    def __init__(self):
        self.live: list[Any] = []
        self.registered: list[Callable[..., Any]] = []

    def register_factory(self, factory: Callable[..., Any]) -> Callable[..., Any]:
        if not callable(factory):
            raise TypeError(f"Factory is not callable: {factory!r}")
        if factory not in self.registered:
            self.registered.append(factory)
        return factory

    def instantiate(self, factory: Callable[..., Any], placement: Placement) -> Any:
        handle = factory(placement)
        self.live.append(handle)
        logger.debug(f"Spawned {handle!r} at {placement.location}")
        return handle

    def destroy(self, handle: Any) -> None:
        for i, obj in enumerate(self.live):
            if obj is handle:
                del self.live[i]
                return
        logger.warning(f"Destroy requested for object not in scene: {handle!r}")
