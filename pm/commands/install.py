"""
pm install command (-S).

Install packages listed in the catalog.
"""

import asyncio
import sys
from typing import Any

from plugdock import InstallError, PluginHost

from pm.commands.common import PMError, build_host


def install_command(args: Any) -> int:
    """
    Execute install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    if not args.targets:
        raise PMError("No targets specified. Usage: pm -S <slug>...")

    host = build_host(args)
    return asyncio.run(install_async(host, args.targets, args.verbose))


async def install_async(host: PluginHost, targets: list[str], verbose: bool = False) -> int:
    """Install each target in turn, one package at a time."""
    await host.fetch_available()

    success_count = 0
    fail_count = 0

    for slug in targets:
        if host.registry.is_installed(slug.lower()):
            print(f"warning: {slug} is already installed -- skipping", file=sys.stderr)
            continue

        descriptor = host.find_available(slug.lower())
        if descriptor is None:
            print(f"Failed to install {slug}: not in catalog", file=sys.stderr)
            fail_count += 1
            continue

        try:
            result = await host.install(descriptor)
        except InstallError as e:
            detail = "" if e.exit_code is None else f" (exit code {e.exit_code})"
            print(f"Failed to install {slug}: {e.reason}{detail}", file=sys.stderr)
            fail_count += 1
            continue

        package = host.get_installed()[result.descriptor.slug]
        print(f"installed {package.slug} ({len(package.capabilities)} actors)")
        success_count += 1

    if verbose:
        print(f"\nInstalled: {success_count}, Failed: {fail_count}")

    return 0 if fail_count == 0 else 1
