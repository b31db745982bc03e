# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry types for the field, relationship, built-in model and parent registries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

# ###############
# Public Interface
# ###############


class FieldType(BaseModel):
    """A Django model field class usable for scalar fields.

    Attributes:
        name: Registry key, the short class name (e.g. ``CharField``).
        path: Fully qualified class path used when rendering imports.
        default_args: Construction arguments suggested for a new field.
        test_default: Literal used for this field in generated tests. Range
            types carry a ``(low, high)`` pair instead of a single literal.
        view_default: Literal used for this field in generated views.
        is_postgres: The type lives in ``django.contrib.postgres``.
        is_postgres_range: The type is one of the postgres range types.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    default_args: str | None = None
    test_default: str | tuple[str, str] | None = None
    view_default: str | None = None
    is_postgres: bool = False
    is_postgres_range: bool = False

    @model_validator(mode="after")
    def _range_requires_postgres(self) -> FieldType:
        if self.is_postgres_range and not self.is_postgres:
            raise ValueError(f"{self.name}: a postgres range type must also be a postgres type")
        return self


class RelationshipType(BaseModel):
    """A Django relational field class (``ForeignKey`` and friends)."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    default_args: str | None = None


class BuiltInModel(BaseModel):
    """A model shipped with Django that can be the target of a relationship.

    Attributes:
        name: Registry key, the short class name (e.g. ``User``).
        label: The ``app_label.ModelName`` label Django uses to refer to it.
        path: Fully qualified class path.
        fields: ``(field name, test value)`` pairs used when generating tests.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    path: str
    fields: tuple[tuple[str, str], ...] = ()

    @property
    def field_defaults(self) -> dict[str, str]:
        """Return the test values keyed by field name."""
        return dict(self.fields)


class ParentModelType(BaseModel):
    """An external base class a model may inherit from (e.g. ``AbstractUser``)."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    path: str
