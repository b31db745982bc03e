# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema model for Django projects (projects, apps, models, fields, relationships)."""

from djangobuilder.model.derivation import (
    DEFAULT_MIDDLEWARES,
    HTMX_MIDDLEWARE,
    StorageModule,
    compose_middlewares,
    concrete_models,
    related_label,
    storage_module,
)
from djangobuilder.model.entities import (
    PK_SENTINEL,
    App,
    DjangoVersion,
    Field,
    Model,
    ModelParent,
    Project,
    Relationship,
    RelationshipTarget,
)

__all__ = [
    # Entities
    "App",
    "DjangoVersion",
    "Field",
    "Model",
    "ModelParent",
    "PK_SENTINEL",
    "Project",
    "Relationship",
    "RelationshipTarget",
    # Derivation rules
    "DEFAULT_MIDDLEWARES",
    "HTMX_MIDDLEWARE",
    "StorageModule",
    "compose_middlewares",
    "concrete_models",
    "related_label",
    "storage_module",
]
