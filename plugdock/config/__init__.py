"""
Plugdock Configuration - TOML-based settings.

Example usage:
    from plugdock.config import load_settings

    settings = load_settings(Path("config/plugdock.toml"))
    print(settings.plugins_root)

The file holds a single ``[plugdock]`` table. A missing file or a missing
table yields the defaults declared in ``plugdock.config.schema``.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from plugdock.config.schema import SETTINGS_SCHEMA, ValidationError, validate_settings
from plugdock.config.toml_handler import TOMLError, read_toml, render_settings, write_text

SECTION = "plugdock"

DEFAULT_CONFIG_FILE = Path("config/plugdock.toml")


class ConfigError(Exception):
    """Raised when the settings file cannot be read or is invalid."""

    pass


@dataclass(frozen=True)
class Settings:
    """Validated plugdock settings."""

    plugins_root: Path
    catalog_url: str = "https://api.github.com/orgs/SIMSDewire/repos"
    accepted_branch: str = "plugin"
    excluded_repos: tuple[str, ...] = field(default_factory=tuple)
    entry_point: str = "index.py"
    capabilities_attribute: str = "actors"
    git_executable: str = "git"
    request_timeout: float = 30.0
    per_page: int = 100

    @classmethod
    def from_mapping(cls, data: dict[str, Any], base_dir: Path | None = None) -> "Settings":
        """
        Build settings from a raw table.

        Args:
            data: Raw ``[plugdock]`` table
            base_dir: Directory that a relative ``plugins_root`` is resolved against

        Raises:
            ConfigError: If the table is invalid
        """
        try:
            values = validate_settings(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e

        plugins_root = Path(values["plugins_root"])
        if base_dir is not None and not plugins_root.is_absolute():
            plugins_root = base_dir / plugins_root

        return cls(
            plugins_root=plugins_root,
            catalog_url=values["catalog_url"],
            accepted_branch=values["accepted_branch"],
            excluded_repos=tuple(values["excluded_repos"]),
            entry_point=values["entry_point"],
            capabilities_attribute=values["capabilities_attribute"],
            git_executable=values["git_executable"],
            request_timeout=values["request_timeout"],
            per_page=values["per_page"],
        )


def load_settings(config_file: Path = DEFAULT_CONFIG_FILE) -> Settings:
    """
    Load settings from a TOML file.

    A relative ``plugins_root`` is resolved against the file's directory.

    Args:
        config_file: Path to the settings file

    Returns:
        Settings instance

    Raises:
        ConfigError: If the file exists but cannot be parsed or is invalid
    """
    if not config_file.exists():
        return Settings.from_mapping({})

    try:
        data = read_toml(config_file)
    except TOMLError as e:
        raise ConfigError(str(e)) from e

    section = data.get(SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{SECTION}] must be a table")

    return Settings.from_mapping(section, base_dir=config_file.parent)


def write_default_settings(config_file: Path = DEFAULT_CONFIG_FILE) -> None:
    """
    Write a commented settings file holding the defaults.

    Raises:
        ConfigError: If the file cannot be written
    """
    try:
        write_text(config_file, render_settings(SECTION, SETTINGS_SCHEMA, {}))
    except TOMLError as e:
        raise ConfigError(str(e)) from e


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_FILE",
    "Settings",
    "load_settings",
    "write_default_settings",
]
