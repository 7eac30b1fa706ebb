"""
Plugdock - plugin package manager for embedding in a host application.

Packages are discovered from a remote catalog, installed with git, loaded
in-process, and the scene objects they create are tracked until destroyed.
"""

__version__ = "0.1.0"

from plugdock.config import Settings, load_settings
from plugdock.errors import (
    CatalogUnavailable,
    GitError,
    InstallError,
    LoadError,
    PlugdockError,
    UninstallError,
)
from plugdock.host import PluginHost
from plugdock.scene import InMemoryScene, Placement, Scene

__all__ = [
    "__version__",
    "CatalogUnavailable",
    "GitError",
    "InMemoryScene",
    "InstallError",
    "LoadError",
    "Placement",
    "PlugdockError",
    "PluginHost",
    "Scene",
    "Settings",
    "UninstallError",
    "load_settings",
]
