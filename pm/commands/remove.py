"""
pm remove command (-R).

Remove installed packages.
"""

import asyncio
import sys
from typing import Any

from plugdock import PluginHost, UninstallError

from pm.commands.common import PMError, build_host


def remove_command(args: Any) -> int:
    """Execute remove command."""
    if not args.targets:
        raise PMError("No targets specified. Usage: pm -R <slug>...")

    host = build_host(args)
    return asyncio.run(remove_async(host, args.targets))


async def remove_async(host: PluginHost, targets: list[str]) -> int:
    fail_count = 0

    for slug in targets:
        descriptor = host.local_descriptor(slug.lower())
        try:
            await host.uninstall(descriptor)
        except UninstallError as e:
            print(f"Failed to remove {slug}: {e.reason}", file=sys.stderr)
            fail_count += 1
            continue
        print(f"removed {descriptor.slug}")

    return 0 if fail_count == 0 else 1
