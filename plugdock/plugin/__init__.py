"""
Plugdock Plugin System - package lifecycle.

This package handles:
- Catalog fetching and descriptor derivation
- git-based installation and removal
- Structural validation
- Entry point loading
- Registry of installed packages and live instances
"""

from plugdock.plugin.catalog import CatalogClient
from plugdock.plugin.descriptor import PluginDescriptor
from plugdock.plugin.installer import Installer, InstallResult
from plugdock.plugin.instances import InstanceTracker, InstantiatedInstance
from plugdock.plugin.loader import Capability, InstalledPackage, PackageLoader
from plugdock.plugin.registry import Registry
from plugdock.plugin.validator import PackageValidator

__all__ = [
    "Capability",
    "CatalogClient",
    "InstallResult",
    "InstalledPackage",
    "Installer",
    "InstanceTracker",
    "InstantiatedInstance",
    "PackageLoader",
    "PackageValidator",
    "PluginDescriptor",
    "Registry",
]
