"""
pm CLI - plugdock package manager.

Pacman-style interface for managing plugdock packages.

Usage:
    pm -S <slug>...              Install package(s) from the catalog
    pm -R <slug>...              Remove package(s)
    pm -Q                        List installed packages
    pm -Ss [query]               Search the catalog
"""

import argparse
import logging
import sys
from pathlib import Path

from plugdock.config import DEFAULT_CONFIG_FILE, ConfigError

from pm.commands.common import PMError


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with pacman-style flags."""
    parser = argparse.ArgumentParser(
        prog="pm",
        description="plugdock package manager - Pacman-style plugin manager",
        add_help=False,
    )

    # Operation flags (mutually exclusive)
    ops = parser.add_mutually_exclusive_group()
    ops.add_argument("-S", "--sync", action="store_true", help="Install package")
    ops.add_argument("-R", "--remove", action="store_true", help="Remove package")
    ops.add_argument("-Q", "--query", action="store_true", help="Query installed")
    ops.add_argument("-h", "--help", action="store_true", help="Show help")

    parser.add_argument("-s", "--search", action="store_true", help="Search (-Ss)")

    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_FILE,
        help="Settings file (default: config/plugdock.toml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    parser.add_argument("targets", nargs="*", help="Package slugs or search query")

    return parser


def print_help():
    """Print help message."""
    help_text = """
pm - plugdock package manager

Usage:
    pm -S <slug>...              Install package(s) from the catalog
    pm -R <slug>...              Remove package(s)
    pm -Q                        List installed packages
    pm -Ss [query]               Search the catalog

Options:
    --config PATH                Settings file (default: config/plugdock.toml)
    -v, --verbose                Verbose output
    -h, --help                   Show this help
"""
    print(help_text.strip())


def main(argv: list[str] | None = None) -> int:
    """Main entry point for pm CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.help or not (args.sync or args.remove or args.query):
            print_help()
            return 0

        if args.sync and args.search:
            from pm.commands.query import search_command

            return search_command(args)

        elif args.sync:
            from pm.commands.install import install_command

            return install_command(args)

        elif args.remove:
            from pm.commands.remove import remove_command

            return remove_command(args)

        elif args.query:
            from pm.commands.query import query_command

            return query_command(args)

    except (PMError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
