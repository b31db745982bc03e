# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the djangobuilder configuration file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from djangobuilder.errors import ConfigError
from djangobuilder.model.entities import DjangoVersion

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".djangobuilder.yaml"


@dataclass(frozen=True)
class BuilderConfig:
    """Options controlling how persisted records are turned into a schema graph.

    Attributes:
        strict_relationship_targets: Fail on a relationship target that matches
            neither a model of the project nor a built-in model, instead of
            falling back to ``auth.User``.
        apply_default_args: Use the registry's default construction arguments
            for records whose ``args`` are empty.
        default_version: Version used for project records without a version.
    """

    strict_relationship_targets: bool = False
    apply_default_args: bool = False
    default_version: DjangoVersion = DjangoVersion.DJANGO4


def load_config(path: Path) -> BuilderConfig:
    """Load and parse a djangobuilder configuration file.

    Args:
        path: Path to the ``.djangobuilder.yaml`` file.

    Returns:
        A BuilderConfig populated from the file.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return parse_config(text, source_label=str(path))


def parse_config(text: str, source_label: str = "<string>") -> BuilderConfig:
    """Parse configuration YAML text into a BuilderConfig.

    An empty document yields the defaults.

    Raises:
        ConfigError: If the YAML is invalid or a key has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return BuilderConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: configuration must be a YAML mapping")

    unknown = sorted(map(str, set(data) - _KNOWN_KEYS))
    if unknown:
        raise ConfigError(f"{source_label}: unknown configuration keys: {', '.join(unknown)}")

    default_version = DjangoVersion.DJANGO4
    if "default-version" in data:
        raw_version = data["default-version"]
        if not isinstance(raw_version, (str, int, float)):
            raise ConfigError(f"{source_label}: 'default-version' must be a version string such as '4.x'")
        default_version = DjangoVersion.from_raw(raw_version)

    return BuilderConfig(
        strict_relationship_targets=_optional_bool(data, "strict-relationship-targets", source_label),
        apply_default_args=_optional_bool(data, "apply-default-args", source_label),
        default_version=default_version,
    )


# ################
# Implementation
# ################

_KNOWN_KEYS = {"strict-relationship-targets", "apply-default-args", "default-version"}


def _optional_bool(mapping: dict[str, object], key: str, source_label: str) -> bool:
    """Extract an optional boolean field, defaulting to False."""
    value = mapping.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(f"{source_label}: '{key}' must be true or false")
    return value
