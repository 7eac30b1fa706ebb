"""
pm query commands (-Q, -Ss).

List installed packages and search the catalog.
"""

import asyncio
from typing import Any

from pm.commands.common import build_host


def query_command(args: Any) -> int:
    """List installed packages and their actors."""
    host = build_host(args)
    installed = host.get_installed()

    for slug, package in sorted(installed.items()):
        if args.targets and slug not in args.targets:
            continue
        print(f"{slug} ({len(package.capabilities)} actors)")
        if args.verbose:
            for index, capability in enumerate(package.capabilities):
                print(f"    [{index}] {capability.name}")

    return 0


def search_command(args: Any) -> int:
    """Search the catalog by slug or display name."""
    host = build_host(args)
    descriptors = asyncio.run(host.fetch_available())
    query = " ".join(args.targets).lower()

    for descriptor in descriptors:
        if query and query not in descriptor.slug and query not in descriptor.display_name.lower():
            continue
        status = "[installed]" if descriptor.installed else ""
        print(f"{descriptor.slug} {status}".rstrip())
        print(f"    {descriptor.display_name} <{descriptor.source_url}>")

    return 0
