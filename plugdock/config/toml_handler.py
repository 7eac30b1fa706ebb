"""
TOML File I/O Handler.

Settings are parsed with tomllib and written with tomlkit so that generated
files carry a descriptive comment above each key.
"""

import tomllib
from pathlib import Path
from typing import Any

import tomlkit

from plugdock.config.schema import ConfigField


class TOMLError(Exception):
    """Base exception for TOML-related errors."""

    pass


def read_toml(file_path: Path) -> dict[str, Any]:
    """
    Read and parse a TOML file.

    Args:
        file_path: Path to the TOML file

    Returns:
        Parsed TOML data as dictionary

    Raises:
        TOMLError: If file cannot be read or parsed
    """
    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise TOMLError(f"TOML file not found: {file_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise TOMLError(f"Failed to parse TOML file {file_path}: {e}") from e
    except OSError as e:
        raise TOMLError(f"Failed to read TOML file {file_path}: {e}") from e


def render_settings(
    section: str, schema: dict[str, ConfigField], values: dict[str, Any]
) -> str:
    """
    Render a settings table as TOML with one comment per key.

    Args:
        section: Table name
        schema: Schema describing the keys
        values: Values to write (schema defaults fill the gaps)

    Returns:
        TOML document as a string
    """
    doc = tomlkit.document()
    doc.add(tomlkit.comment(f"{section} settings"))
    doc.add(tomlkit.nl())

    table = tomlkit.table()
    for name, field in schema.items():
        if field.description:
            table.add(tomlkit.comment(field.description))
        if field.min is not None or field.max is not None:
            table.add(tomlkit.comment(f"Range: {field.min} .. {field.max}"))
        table.add(name, values.get(name, field.default))
        table.add(tomlkit.nl())

    doc.add(section, table)
    return tomlkit.dumps(doc)


def write_text(file_path: Path, content: str) -> None:
    """
    Write rendered TOML to disk, creating parent directories.

    Raises:
        TOMLError: If file cannot be written
    """
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise TOMLError(f"Failed to write TOML file {file_path}: {e}") from e
