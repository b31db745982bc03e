# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Read-only registries of Django field types, relationship types and models."""

from djangobuilder.registry.tables import (
    AUTH_USER,
    AUTO_TYPES,
    BUILT_IN_MODELS,
    FIELD_TYPES,
    FOREIGN_KEY,
    MANY_TO_MANY,
    META_PARAMS,
    ONE_TO_ONE,
    PARENT_MODEL_TYPES,
    RELATIONSHIP_TYPES,
    SLUG_TYPE,
    get_built_in_model,
    get_field_type,
    get_parent_model_type,
    get_relationship_type,
    last_segment,
    resolve_built_in_model,
    resolve_field_type,
    resolve_relationship_type,
)
from djangobuilder.registry.types import BuiltInModel, FieldType, ParentModelType, RelationshipType

__all__ = [
    # Entry types
    "BuiltInModel",
    "FieldType",
    "ParentModelType",
    "RelationshipType",
    # Registries
    "BUILT_IN_MODELS",
    "FIELD_TYPES",
    "PARENT_MODEL_TYPES",
    "RELATIONSHIP_TYPES",
    "AUTH_USER",
    "AUTO_TYPES",
    "META_PARAMS",
    "SLUG_TYPE",
    "FOREIGN_KEY",
    "ONE_TO_ONE",
    "MANY_TO_MANY",
    # Lookups
    "get_built_in_model",
    "get_field_type",
    "get_parent_model_type",
    "get_relationship_type",
    "last_segment",
    "resolve_built_in_model",
    "resolve_field_type",
    "resolve_relationship_type",
]
