"""
Unit tests for install and uninstall.

Tests cover:
- git subprocess invocation
- Install success, clone failure, validation and load failures
- Uninstall success, missing directory, delete failure
- Install/uninstall round trip with live instances
"""

import asyncio
import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from conftest import make_clone, write_package
from plugdock.errors import GitError, InstallError, UninstallError
from plugdock.plugin.descriptor import PluginDescriptor
from plugdock.plugin.git_ops import clone_repository
from plugdock.plugin.installer import Installer
from plugdock.plugin.instances import InstanceTracker
from plugdock.plugin.loader import MODULE_PREFIX, PackageLoader
from plugdock.plugin.registry import Registry
from plugdock.plugin.validator import PackageValidator
from plugdock.scene import InMemoryScene, Placement


@pytest.fixture
def mock_process():
    """Mock git subprocess."""
    process = MagicMock()
    process.pid = 4242
    process.wait = AsyncMock(return_value=0)
    return process


def build(settings, clone):
    scene = InMemoryScene()
    registry = Registry(settings.plugins_root)
    tracker = InstanceTracker(registry, scene)
    installer = Installer(
        settings,
        registry,
        PackageLoader(scene),
        PackageValidator(),
        tracker,
        clone=clone,
    )
    return installer, registry, tracker, scene


def descriptor_for(settings, full_name="org/foo"):
    return PluginDescriptor.from_catalog_entry(
        {"full_name": full_name, "html_url": f"https://example/{full_name}"},
        settings.plugins_root,
    )


# git operations


@pytest.mark.asyncio
async def test_clone_repository_invocation(tmp_path, mock_process):
    with patch("asyncio.create_subprocess_exec", return_value=mock_process) as spawn:
        exit_code = await clone_repository("https://example/org/foo", "org_foo", tmp_path)

    assert exit_code == 0
    args, kwargs = spawn.call_args
    assert args == ("git", "clone", "https://example/org/foo", "org_foo")
    assert kwargs["cwd"] == tmp_path
    assert kwargs["stdin"] == asyncio.subprocess.DEVNULL
    assert kwargs["env"]["GIT_TERMINAL_PROMPT"] == "0"
    mock_process.wait.assert_awaited_once()


@pytest.mark.asyncio
async def test_clone_repository_exit_code(tmp_path, mock_process):
    mock_process.wait = AsyncMock(return_value=128)

    with patch("asyncio.create_subprocess_exec", return_value=mock_process):
        assert await clone_repository("url", "org_foo", tmp_path) == 128


@pytest.mark.asyncio
async def test_clone_repository_git_missing(tmp_path):
    with patch("asyncio.create_subprocess_exec", side_effect=FileNotFoundError("git")):
        with pytest.raises(GitError, match="git command not found"):
            await clone_repository("url", "org_foo", tmp_path, git_executable="git")


# Install


@pytest.mark.asyncio
async def test_install_success(settings):
    """A clean clone should be validated, loaded and registered."""
    clone = make_clone()
    installer, registry, _, _ = build(settings, clone)
    descriptor = descriptor_for(settings)

    result = await installer.install(descriptor)

    assert result.exit_code == 0
    assert result.descriptor is descriptor
    assert clone.calls == [
        ("https://example/org/foo", "org_foo", settings.plugins_root, "git")
    ]
    package = registry.get_installed()["org_foo"]
    assert len(package.capabilities) > 0
    assert descriptor.local_path.is_dir()


@pytest.mark.asyncio
async def test_install_clone_failure(settings):
    installer, registry, _, _ = build(settings, make_clone(exit_code=128))
    descriptor = descriptor_for(settings)

    with pytest.raises(InstallError) as exc_info:
        await installer.install(descriptor)

    assert exc_info.value.exit_code == 128
    assert exc_info.value.descriptor is descriptor
    assert registry.get_installed() == {}


@pytest.mark.asyncio
async def test_install_git_missing(settings):
    async def clone(*args):
        raise GitError("git command not found: git")

    installer, registry, _, _ = build(settings, clone)

    with pytest.raises(InstallError) as exc_info:
        await installer.install(descriptor_for(settings))

    assert exc_info.value.exit_code is None
    assert registry.get_installed() == {}


@pytest.mark.asyncio
async def test_install_invalid_tree_leaves_partial_directory(settings):
    """A clone without entry point should fail without rolling the directory back."""

    async def clone(source_url, directory_name, cwd, git_executable="git"):
        (cwd / directory_name).mkdir()
        (cwd / directory_name / "README.md").write_text("no entry point")
        return 0

    installer, registry, _, _ = build(settings, clone)
    descriptor = descriptor_for(settings)

    with pytest.raises(InstallError, match="has no index.py") as exc_info:
        await installer.install(descriptor)

    assert exc_info.value.exit_code == 0
    assert registry.get_installed() == {}
    assert descriptor.local_path.is_dir()


@pytest.mark.asyncio
async def test_install_load_failure(settings):
    installer, registry, _, _ = build(settings, make_clone(source="actors = 'nope'\n"))

    with pytest.raises(InstallError, match="must export 'actors'"):
        await installer.install(descriptor_for(settings))

    assert registry.get_installed() == {}


@pytest.mark.asyncio
async def test_install_bad_capability_metadata(settings):
    source = "actors = [{'factory': dict, 'metadata': 5}]\n"
    installer, registry, _, _ = build(settings, make_clone(source=source))

    with pytest.raises(InstallError, match="metadata must be a mapping"):
        await installer.install(descriptor_for(settings))

    assert registry.get_installed() == {}


@pytest.mark.asyncio
async def test_install_entry_point_exits(settings):
    """sys.exit() in a package's entry point is an install failure, not an exit."""
    installer, registry, _, _ = build(settings, make_clone(source="import sys\nsys.exit(3)\n"))

    with pytest.raises(InstallError, match="SystemExit"):
        await installer.install(descriptor_for(settings))

    assert registry.get_installed() == {}
    assert MODULE_PREFIX + "org_foo" not in sys.modules


@pytest.mark.asyncio
async def test_install_creates_plugins_root(settings):
    installer, _, _, _ = build(settings, make_clone())
    assert not settings.plugins_root.exists()

    await installer.install(descriptor_for(settings))

    assert settings.plugins_root.is_dir()


# Uninstall


@pytest.mark.asyncio
async def test_install_uninstall_round_trip(settings):
    installer, registry, tracker, scene = build(settings, make_clone())
    foo = descriptor_for(settings, "org/foo")
    bar = descriptor_for(settings, "org/bar")
    await installer.install(foo)
    await installer.install(bar)

    chair = tracker.instantiate("org_foo", 0, Placement())
    tracker.instantiate("org_foo", 1, Placement())
    kept = tracker.instantiate("org_bar", 0, Placement())

    await installer.uninstall(foo)

    assert "org_foo" not in registry.get_installed()
    assert not foo.local_path.exists()
    assert [i.slug for i in registry.get_instances()] == ["org_bar"]
    assert registry.get_instances()[0] is kept
    assert chair.handle.torn_down is True
    assert scene.live == [kept.handle]
    assert MODULE_PREFIX + "org_foo" not in sys.modules


class FailingDestroyScene(InMemoryScene):
    def destroy(self, handle):
        raise RuntimeError("host destroy failed")


@pytest.mark.asyncio
async def test_uninstall_when_scene_destroy_fails(settings):
    """Instances of the removed package are forgotten even if the scene cannot destroy them."""
    scene = FailingDestroyScene()
    registry = Registry(settings.plugins_root)
    tracker = InstanceTracker(registry, scene)
    installer = Installer(
        settings,
        registry,
        PackageLoader(scene),
        PackageValidator(),
        tracker,
        clone=make_clone(),
    )
    foo = descriptor_for(settings, "org/foo")
    bar = descriptor_for(settings, "org/bar")
    await installer.install(foo)
    await installer.install(bar)
    tracker.instantiate("org_foo", 0)
    tracker.instantiate("org_foo", 1)
    kept = tracker.instantiate("org_bar", 0)

    await installer.uninstall(foo)

    assert not foo.local_path.exists()
    assert "org_foo" not in registry.get_installed()
    assert registry.get_instances() == [kept]


@pytest.mark.asyncio
async def test_uninstall_missing_directory(settings):
    """Uninstalling a manually deleted package should fail and change nothing."""
    installer, registry, tracker, _ = build(settings, make_clone())
    descriptor = descriptor_for(settings)
    await installer.install(descriptor)
    tracker.instantiate("org_foo", 0)

    import shutil

    shutil.rmtree(descriptor.local_path)
    installed_before = registry.get_installed()
    instances_before = registry.get_instances()

    with pytest.raises(UninstallError, match="does not exist") as exc_info:
        await installer.uninstall(descriptor)

    assert exc_info.value.descriptor is descriptor
    assert registry.get_installed() == installed_before
    assert registry.get_instances() == instances_before


@pytest.mark.asyncio
async def test_uninstall_delete_failure(settings):
    installer, registry, tracker, _ = build(settings, make_clone())
    descriptor = descriptor_for(settings)
    await installer.install(descriptor)
    tracker.instantiate("org_foo", 0)

    with patch(
        "plugdock.plugin.installer.shutil.rmtree",
        side_effect=PermissionError("in use"),
    ):
        with pytest.raises(UninstallError, match="Failed to delete"):
            await installer.uninstall(descriptor)

    assert "org_foo" in registry.get_installed()
    assert len(registry.get_instances()) == 1
    assert descriptor.local_path.is_dir()


@pytest.mark.asyncio
async def test_uninstall_package_not_registered(settings):
    """A directory that never loaded should still be removable."""
    installer, registry, _, _ = build(settings, make_clone())
    descriptor = descriptor_for(settings)
    write_package(settings.plugins_root, "org_foo", "raise SystemError\n")

    await installer.uninstall(descriptor)

    assert not descriptor.local_path.exists()
    assert registry.get_installed() == {}


@pytest.mark.asyncio
async def test_reinstall_into_existing_directory_reports_failure(settings):
    """git refuses a non-empty target; the error is reported, not raised further."""
    installer, registry, _, _ = build(settings, make_clone())
    descriptor = descriptor_for(settings)
    await installer.install(descriptor)

    installer._clone = make_clone(exit_code=128)

    with pytest.raises(InstallError) as exc_info:
        await installer.install(descriptor)

    assert exc_info.value.exit_code == 128
    assert "org_foo" in registry.get_installed()
