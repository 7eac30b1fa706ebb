"""
Plugin Descriptors.

A descriptor identifies a package offered by the catalog, whether or not it
is installed. The slug is derived from the repository's full name and is the
key used everywhere else; it also fixes the package's local directory.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

GITHUB_BASE_URL = "https://github.com/"


class DescriptorError(ValueError):
    """Raised when a catalog entry cannot be turned into a descriptor."""

    pass


def make_slug(full_name: str) -> str:
    """
    Derive the slug for a repository full name.

    Example:
        make_slug("SIMSDewire/Chairs") -> "simsdewire_chairs"
    """
    return full_name.strip().lower().replace("/", "_")


def local_path(plugins_root: Path, slug: str) -> Path:
    """Directory a package with this slug is installed into."""
    return plugins_root / slug


@dataclass(frozen=True)
class PluginDescriptor:
    """
    A package available from the catalog.

    Attributes:
        slug: Unique lowercase identifier, e.g. "org_foo"
        display_name: Short human-readable name
        source_url: Location the package is cloned from
        local_path: plugins_root / slug
        installed: Whether local_path existed when the descriptor was built.
            This is a snapshot and goes stale after install/uninstall.
    """

    slug: str
    display_name: str
    source_url: str
    local_path: Path
    installed: bool = False

    @classmethod
    def from_catalog_entry(
        cls, entry: dict[str, Any], plugins_root: Path
    ) -> "PluginDescriptor":
        """
        Build a descriptor from a raw catalog entry.

        Args:
            entry: Repository object from the catalog
            plugins_root: Root directory for installed packages

        Raises:
            DescriptorError: If the entry has no usable full name
        """
        full_name = entry.get("full_name")
        if not isinstance(full_name, str) or "/" not in full_name:
            raise DescriptorError(f"Catalog entry has no valid full_name: {full_name!r}")

        slug = make_slug(full_name)
        path = local_path(plugins_root, slug)
        display_name = entry.get("name") or full_name.split("/", 1)[1]
        source_url = (
            entry.get("clone_url") or entry.get("html_url") or GITHUB_BASE_URL + full_name
        )

        return cls(
            slug=slug,
            display_name=display_name,
            source_url=source_url,
            local_path=path,
            installed=path.is_dir(),
        )

    @classmethod
    def for_local(cls, slug: str, plugins_root: Path) -> "PluginDescriptor":
        """Descriptor for a package found on disk with no catalog entry."""
        path = local_path(plugins_root, slug)
        return cls(
            slug=slug,
            display_name=slug,
            source_url="",
            local_path=path,
            installed=path.is_dir(),
        )
