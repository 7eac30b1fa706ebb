"""
Dynamic Package Loader.

This module executes a package's entry point and extracts its capabilities.

Key features:
- importlib integration for dynamic loading
- Per-slug module naming, reload on reinstall
- Capability extraction from a module-level list of actor factories
- Factory registration through the host scene

Entry point contract (``index.py`` by default)::

    class Chair:
        def __init__(self, placement): ...

    actors = [
        Chair,
        {"factory": Lamp, "name": "Desk lamp", "metadata": {"category": "light"}},
    ]

Executing an entry point runs third-party code inside the host process.
"""

import importlib.util
import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

from plugdock.errors import LoadError
from plugdock.scene import Scene
from plugdock.plugin.validator import DEFAULT_ENTRY_POINT

logger = logging.getLogger(__name__)

MODULE_PREFIX = "plugdock_package_"


@dataclass(frozen=True)
class Capability:
    """
    One instantiable object kind exported by a package.

    Attributes:
        factory: Registered factory, called with a Placement
        name: Display name of the kind
        metadata: Any extra data the package declared
    """

    factory: Callable[..., Any]
    name: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class InstalledPackage:
    """
    A validated, loaded package.

    Attributes:
        slug: Package slug
        path: Package directory
        capabilities: Exported capabilities, fixed at load time
        module: Executed entry point module
    """

    slug: str
    path: Path
    capabilities: tuple[Capability, ...]
    module: ModuleType | None = None


class PackageLoader:
    """Loads package entry points into the host process."""

    def __init__(
        self,
        scene: Scene,
        entry_point: str = DEFAULT_ENTRY_POINT,
        capabilities_attribute: str = "actors",
    ):
        """
        Initialize PackageLoader.

        Args:
            scene: Host scene used to register factories
            entry_point: Entry point file name at the package root
            capabilities_attribute: Module attribute listing actor factories
        """
        self.scene = scene
        self.entry_point = entry_point
        self.capabilities_attribute = capabilities_attribute

    def load(self, path: Path, slug: str) -> InstalledPackage:
        """
        Execute a package entry point and build its InstalledPackage.

        A package that was loaded before is executed again from disk.

        Args:
            path: Package directory
            slug: Package slug

        Returns:
            InstalledPackage with registered capabilities

        Raises:
            LoadError: If the entry point cannot be executed or exports no
                recognizable capability list
        """
        module = self._execute(path, slug)

        try:
            capabilities = self._extract_capabilities(path, module)
        except LoadError:
            self.unload(slug)
            raise
        except Exception as e:
            self.unload(slug)
            raise LoadError(
                path, f"Reading capabilities raised {type(e).__name__}: {e}"
            ) from e

        logger.info(f"Loaded {slug} with {len(capabilities)} capabilities")
        return InstalledPackage(
            slug=slug, path=path, capabilities=capabilities, module=module
        )

    def _execute(self, path: Path, slug: str) -> ModuleType:
        entry_point = path / self.entry_point
        if not entry_point.is_file():
            raise LoadError(path, f"Entry point not found: {entry_point}")

        module_name = MODULE_PREFIX + slug
        self.unload(slug)

        try:
            spec = importlib.util.spec_from_file_location(module_name, entry_point)
            if spec is None or spec.loader is None:
                raise LoadError(path, f"Failed to create module spec for {entry_point}")

            module = importlib.util.module_from_spec(spec)

            # Add to sys.modules before execution so relative lookups work
            sys.modules[module_name] = module
            spec.loader.exec_module(module)
            return module

        except LoadError:
            sys.modules.pop(module_name, None)
            raise
        except (Exception, SystemExit) as e:
            sys.modules.pop(module_name, None)
            raise LoadError(path, f"Entry point raised {type(e).__name__}: {e}") from e

    def _extract_capabilities(
        self, path: Path, module: ModuleType
    ) -> tuple[Capability, ...]:
        exported = getattr(module, self.capabilities_attribute, None)
        if not isinstance(exported, (list, tuple)):
            raise LoadError(
                path,
                f"Entry point must export '{self.capabilities_attribute}' as a list, "
                f"got {type(exported).__name__}",
            )

        capabilities = []
        for index, item in enumerate(exported):
            if isinstance(item, Mapping):
                factory = item.get("factory")
                name = item.get("name")
                metadata = {
                    k: v for k, v in item.items() if k not in ("factory", "name", "metadata")
                }
                declared = item.get("metadata") or {}
                if not isinstance(declared, Mapping):
                    raise LoadError(path, f"Capability {index} metadata must be a mapping")
                metadata.update(declared)
            else:
                factory, name, metadata = item, None, {}

            if not callable(factory):
                raise LoadError(path, f"Capability {index} has no callable factory")

            try:
                registered = self.scene.register_factory(factory)
            except Exception as e:
                raise LoadError(
                    path, f"Host rejected factory for capability {index}: {e}"
                ) from e

            capabilities.append(
                Capability(
                    factory=registered,
                    name=name or getattr(factory, "__name__", f"actor_{index}"),
                    metadata=metadata,
                )
            )

        return tuple(capabilities)

    def unload(self, slug: str) -> None:
        """Remove a package module from sys.modules."""
        sys.modules.pop(MODULE_PREFIX + slug, None)
