"""Shared fixtures for plugdock tests."""

from pathlib import Path

import pytest

from plugdock.config import Settings

ENTRY_SOURCE = '''
class Chair:
    def __init__(self, placement):
        self.placement = placement
        self.torn_down = False

    def teardown(self):
        self.torn_down = True


class Lamp:
    def __init__(self, placement):
        self.placement = placement


actors = [
    Chair,
    {"factory": Lamp, "name": "Desk lamp", "metadata": {"category": "light"}},
]
'''


def write_package(plugins_root: Path, slug: str, source: str = ENTRY_SOURCE) -> Path:
    """Create a package directory with an index.py entry point."""
    package_dir = plugins_root / slug
    package_dir.mkdir(parents=True, exist_ok=True)
    (package_dir / "index.py").write_text(source)
    return package_dir


def make_clone(exit_code: int = 0, source: str | None = ENTRY_SOURCE):
    """
    Build a fake clone coroutine.

    On exit code 0 it writes a package tree (unless source is None) the way
    a successful git clone would.
    """
    calls = []

    async def clone(source_url, directory_name, cwd, git_executable="git"):
        calls.append((source_url, directory_name, cwd, git_executable))
        if exit_code == 0 and source is not None:
            write_package(cwd, directory_name, source)
        return exit_code

    clone.calls = calls
    return clone


@pytest.fixture
def plugins_root(tmp_path) -> Path:
    return tmp_path / "plugins"


@pytest.fixture
def settings(plugins_root) -> Settings:
    return Settings(
        plugins_root=plugins_root,
        catalog_url="https://catalog.test/orgs/acme/repos",
        accepted_branch="plugin",
        excluded_repos=("ExploringSysOps",),
    )
