# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rendering-relevant facts derived from schema entities.

Everything here is a pure function of its arguments. Results are computed
on every call and never cached on the entities themselves, so they always
reflect the current state of the graph.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING

from djangobuilder.registry.types import BuiltInModel, FieldType

if TYPE_CHECKING:
    from djangobuilder.model.entities import Model, RelationshipTarget

# ###############
# Public Interface
# ###############


class StorageModule(Enum):
    """The module a field class has to be imported from."""

    MODELS = "models"
    POSTGRES = "postgres_fields"
    POSTGRES_RANGE = "postgres_range_fields"


DEFAULT_MIDDLEWARES: tuple[str, ...] = (
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
)

HTMX_MIDDLEWARE = "django_htmx.middleware.HtmxMiddleware"


def storage_module(field_type: FieldType) -> StorageModule:
    """Classify where a field of *field_type* is imported from."""
    if not field_type.is_postgres:
        return StorageModule.MODELS
    if field_type.is_postgres_range:
        return StorageModule.POSTGRES_RANGE
    return StorageModule.POSTGRES


def related_label(target: RelationshipTarget) -> str:
    """Return the ``app_label.ModelName`` label of a relationship target.

    Schema models are labelled by their owning app's current name; built-in
    models use their registered label verbatim.
    """
    if isinstance(target, BuiltInModel):
        return target.label
    return f"{target.app.name}.{target.name}"


def compose_middlewares(*, htmx: bool) -> list[str]:
    """Return a new middleware list for a project.

    The default Django middleware stack comes first; the htmx middleware is
    appended when the project uses htmx.
    """
    middlewares = list(DEFAULT_MIDDLEWARES)
    if htmx:
        middlewares.append(HTMX_MIDDLEWARE)
    return middlewares


def concrete_models(models: Iterable[Model]) -> list[Model]:
    """Return the models that are not abstract, preserving order."""
    return [model for model in models if not model.abstract]
