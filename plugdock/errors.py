"""
Plugdock exception hierarchy.

All errors raised by the package manager derive from PlugdockError so that
callers embedding plugdock can catch a single base class.
"""

from pathlib import Path
from typing import Any


class PlugdockError(Exception):
    """Base exception for plugdock errors."""

    pass


class CatalogUnavailable(PlugdockError):
    """Raised when the remote catalog cannot be reached or parsed."""

    pass


class GitError(PlugdockError):
    """Raised when the git executable cannot be started."""

    pass


class LoadError(PlugdockError):
    """Raised when a package entry point cannot be executed or is malformed."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"Failed to load package at {path}: {message}")
        self.path = path


class InstallError(PlugdockError):
    """
    Raised when an install fails.

    Attributes:
        descriptor: Descriptor whose install failed, so it can be re-offered
        exit_code: Clone exit code, or None if git never ran
    """

    def __init__(self, descriptor: Any, exit_code: int | None, reason: str):
        super().__init__(f"Failed to install {descriptor.slug}: {reason}")
        self.descriptor = descriptor
        self.exit_code = exit_code
        self.reason = reason


class UninstallError(PlugdockError):
    """Raised when an uninstall fails. No registry state has been changed."""

    def __init__(self, descriptor: Any, reason: str):
        super().__init__(f"Failed to uninstall {descriptor.slug}: {reason}")
        self.descriptor = descriptor
        self.reason = reason
