# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error kinds raised by the schema model, its registries and the builder."""

from __future__ import annotations

# ###############
# Public Interface
# ###############


class DjangoBuilderError(Exception):
    """Base class for all errors raised by djangobuilder."""


class ReferenceNotFound(DjangoBuilderError):
    """Raised when a name does not refer to an entity of its purported owner.

    Attributes:
        name: The name that could not be found.
        owner: The name of the owning entity that was searched.
        kind: What kind of entity was looked up (``field``, ``model``, ...).
    """

    def __init__(self, name: str, owner: str, kind: str = "field") -> None:
        self.name = name
        self.owner = owner
        self.kind = kind
        if kind == "field":
            message = f"{name} is not a field on the Model {owner}"
        else:
            message = f"{name} is not a {kind} of {owner}"
        super().__init__(message)


class RegistryKeyNotFound(DjangoBuilderError):
    """Raised when a key has no entry in one of the type registries.

    Attributes:
        registry: Human-readable registry name (e.g. ``field type``).
        key: The key that missed.
    """

    def __init__(self, registry: str, key: str) -> None:
        self.registry = registry
        self.key = key
        super().__init__(f"Unknown {registry} '{key}'")


class InvariantViolation(DjangoBuilderError):
    """Raised when a mutation would break a structural invariant of the graph."""


class ConfigError(DjangoBuilderError):
    """Raised when a builder configuration file is invalid or cannot be loaded."""
