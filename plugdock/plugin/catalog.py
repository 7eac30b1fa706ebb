"""
Remote Package Catalog.

This module fetches the list of installable packages.

Key features:
- Async HTTP with httpx
- Filtering of private repositories and repositories on the wrong branch
- Excluded repository names
- Failures degrade to an empty list instead of raising
"""

import logging
from typing import Any

import httpx

from plugdock.config import Settings
from plugdock.errors import CatalogUnavailable
from plugdock.plugin.descriptor import DescriptorError, PluginDescriptor

logger = logging.getLogger(__name__)


class CatalogClient:
    """Client for the remote package catalog."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        """
        Initialize CatalogClient.

        Args:
            settings: plugdock settings (catalog URL, branch filter, plugins root)
            transport: Optional httpx transport, used to stub the network
        """
        self.settings = settings
        self._transport = transport

    async def fetch_list(self) -> list[PluginDescriptor]:
        """
        Fetch the catalog and convert accepted entries into descriptors.

        The packages root is created first, on every call.

        Returns:
            Descriptors in catalog order, unique by slug. Empty if the catalog
            is unavailable.
        """
        try:
            self.settings.plugins_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create packages root {self.settings.plugins_root}: {e}")
            return []

        try:
            entries = await self._fetch_entries()
        except CatalogUnavailable as e:
            logger.error(f"Catalog unavailable: {e}")
            return []

        return self.parse_entries(entries)

    async def _fetch_entries(self) -> list[Any]:
        """
        Request the raw entry list.

        Raises:
            CatalogUnavailable: On transport, status or decoding failure
        """
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.settings.request_timeout,
                headers={"Accept": "application/vnd.github+json"},
                follow_redirects=True,
            ) as client:
                response = await client.get(
                    self.settings.catalog_url,
                    params={"per_page": self.settings.per_page},
                )
                response.raise_for_status()
                data = response.json()

        except httpx.HTTPError as e:
            raise CatalogUnavailable(f"HTTP error: {e}") from e
        except ValueError as e:
            raise CatalogUnavailable(f"Invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise CatalogUnavailable(
                f"Expected a list of entries, got {type(data).__name__}"
            )

        return data

    def parse_entries(self, entries: list[Any]) -> list[PluginDescriptor]:
        """
        Filter raw entries and turn them into descriptors.

        Args:
            entries: Raw catalog entries

        Returns:
            Accepted descriptors, first occurrence of each slug kept
        """
        descriptors: list[PluginDescriptor] = []
        seen: set[str] = set()

        for entry in entries:
            if not self._accepts(entry):
                continue

            try:
                descriptor = PluginDescriptor.from_catalog_entry(
                    entry, self.settings.plugins_root
                )
            except DescriptorError as e:
                logger.warning(f"Skipping catalog entry: {e}")
                continue

            if descriptor.slug in seen:
                logger.warning(f"Duplicate catalog slug ignored: {descriptor.slug}")
                continue

            seen.add(descriptor.slug)
            descriptors.append(descriptor)

        logger.info(f"Catalog lists {len(descriptors)} package(s)")
        return descriptors

    def _accepts(self, entry: Any) -> bool:
        if not isinstance(entry, dict):
            logger.warning(f"Skipping malformed catalog entry: {entry!r}")
            return False
        if entry.get("private", False):
            return False
        if entry.get("default_branch") != self.settings.accepted_branch:
            return False

        name = entry.get("name")
        if name is None and isinstance(entry.get("full_name"), str):
            name = entry["full_name"].split("/")[-1]
        return name not in self.settings.excluded_repos


__all__ = ["CatalogClient"]
