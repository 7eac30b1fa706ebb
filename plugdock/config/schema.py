"""
Settings Schema.

This module declares the settings plugdock understands and validates values
read from the settings file against them.

Key features:
- Typed field definitions with numeric range constraints
- Defaults used when a key is absent from the file
- Rejection of unknown keys
"""

from dataclasses import dataclass
from typing import Any


class SchemaError(Exception):
    """Base exception for schema-related errors."""

    pass


class ValidationError(SchemaError):
    """Raised when a settings value fails validation."""

    pass


@dataclass
class ConfigField:
    """
    A single setting with type and constraints.

    Attributes:
        type_: Expected type of the value
        default: Value used when the key is absent
        description: Human-readable description, written as a TOML comment
        min: Minimum value (numbers only)
        max: Maximum value (numbers only)
    """

    type_: type
    default: Any
    description: str = ""
    min: Any = None
    max: Any = None

    def __post_init__(self):
        if not isinstance(self.default, self.type_):
            raise SchemaError(
                f"Default value {self.default!r} does not match type {self.type_.__name__}"
            )
        if (self.min is not None or self.max is not None) and self.type_ not in (
            int,
            float,
        ):
            raise SchemaError(
                f"min/max constraints only supported for int and float. Got {self.type_.__name__}"
            )

    def validate(self, value: Any) -> Any:
        """
        Validate a value and return it, coercing ints to floats for float fields.

        Args:
            value: The value read from the settings file

        Returns:
            The validated value

        Raises:
            ValidationError: If validation fails
        """
        if self.type_ is float and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)

        if not isinstance(value, self.type_) or (
            self.type_ is not bool and isinstance(value, bool)
        ):
            raise ValidationError(
                f"Expected type {self.type_.__name__}, got {type(value).__name__}"
            )

        if self.min is not None and value < self.min:
            raise ValidationError(f"Value {value} is less than minimum {self.min}")
        if self.max is not None and value > self.max:
            raise ValidationError(f"Value {value} is greater than maximum {self.max}")

        if self.type_ is list and not all(isinstance(item, str) for item in value):
            raise ValidationError("List entries must be strings")

        return value


SETTINGS_SCHEMA: dict[str, ConfigField] = {
    "plugins_root": ConfigField(
        str, "plugins", "Directory holding one subdirectory per installed package"
    ),
    "catalog_url": ConfigField(
        str,
        "https://api.github.com/orgs/SIMSDewire/repos",
        "Remote catalog endpoint (GitHub organisation repository listing)",
    ),
    "accepted_branch": ConfigField(
        str, "plugin", "Only repositories whose default branch has this name are offered"
    ),
    "excluded_repos": ConfigField(
        list, [], "Repository names that are never offered as packages"
    ),
    "entry_point": ConfigField(
        str, "index.py", "Entry point file that must exist at the package root"
    ),
    "capabilities_attribute": ConfigField(
        str, "actors", "Entry point attribute listing the package's actor factories"
    ),
    "git_executable": ConfigField(str, "git", "git executable used to clone packages"),
    "request_timeout": ConfigField(
        float, 30.0, "Catalog request timeout in seconds", min=1.0, max=600.0
    ),
    "per_page": ConfigField(
        int, 100, "Number of catalog entries requested per page", min=1, max=100
    ),
}


def validate_settings(
    data: dict[str, Any], schema: dict[str, ConfigField] = SETTINGS_SCHEMA
) -> dict[str, Any]:
    """
    Validate a settings table and fill in defaults for missing keys.

    Args:
        data: Table read from the settings file
        schema: Schema to validate against

    Returns:
        Complete settings dictionary

    Raises:
        ValidationError: If a key is unknown or a value is invalid
    """
    for key in data:
        if key not in schema:
            raise ValidationError(f"Unknown settings field: {key}")

    result = {}
    for name, field in schema.items():
        if name not in data:
            result[name] = (
                list(field.default) if isinstance(field.default, list) else field.default
            )
            continue
        try:
            result[name] = field.validate(data[name])
        except ValidationError as e:
            raise ValidationError(f"Field '{name}': {e}") from e

    return result
