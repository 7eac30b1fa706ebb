"""
Package Validation.

A package is valid when its directory exists and holds the entry point file
at its root. Validation is structural only: the entry point is neither parsed
nor executed here.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_POINT = "index.py"


class PackageValidator:
    """Structural check for installed package directories."""

    def __init__(self, entry_point: str = DEFAULT_ENTRY_POINT):
        self.entry_point = entry_point

    def is_valid(self, path: Path) -> bool:
        """
        Check whether a directory is a structurally valid package.

        Args:
            path: Package directory

        Returns:
            True if the directory exists and contains the entry point file.
            I/O errors count as invalid.
        """
        try:
            return path.is_dir() and (path / self.entry_point).is_file()
        except OSError as e:
            logger.debug(f"Cannot inspect {path}: {e}")
            return False
