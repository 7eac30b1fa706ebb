"""Helpers shared by pm commands."""

from typing import Any

from plugdock import PluginHost, load_settings


class PMError(Exception):
    """Base exception for pm errors."""

    pass


def build_host(args: Any) -> PluginHost:
    """Load settings and start a host with installed packages scanned."""
    host = PluginHost(load_settings(args.config))
    host.start()
    return host
