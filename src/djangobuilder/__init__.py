# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""DjangoBuilder: a declarative schema model for Django projects."""

from djangobuilder.builder import (
    add_app,
    add_field,
    add_model,
    add_parent,
    add_relationship,
    create_project,
    find_model,
    get_app,
    get_model,
    remove_app,
    remove_field,
    remove_model,
    remove_relationship,
    set_name_field,
)
from djangobuilder.errors import (
    ConfigError,
    DjangoBuilderError,
    InvariantViolation,
    ReferenceNotFound,
    RegistryKeyNotFound,
)

__all__ = [
    # Builder API
    "add_app",
    "add_field",
    "add_model",
    "add_parent",
    "add_relationship",
    "create_project",
    "find_model",
    "get_app",
    "get_model",
    "remove_app",
    "remove_field",
    "remove_model",
    "remove_relationship",
    "set_name_field",
    # Errors
    "ConfigError",
    "DjangoBuilderError",
    "InvariantViolation",
    "ReferenceNotFound",
    "RegistryKeyNotFound",
]
