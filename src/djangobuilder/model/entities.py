# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""The schema graph: Project -> App -> Model -> Field / Relationship.

Entities compare by identity. Each one holds a back-reference to its owner,
set once at creation; use :mod:`djangobuilder.builder` to create them.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum

from djangobuilder.model.derivation import (
    StorageModule,
    compose_middlewares,
    concrete_models,
    related_label,
    storage_module,
)
from djangobuilder.registry.types import BuiltInModel, FieldType, ParentModelType, RelationshipType

# ###############
# Public Interface
# ###############

PK_SENTINEL = "pk"


class DjangoVersion(Enum):
    """Supported major Django versions."""

    DJANGO2 = "2.x"
    DJANGO3 = "3.x"
    DJANGO4 = "4.x"

    @classmethod
    def from_raw(cls, raw: object) -> DjangoVersion:
        """Map a persisted version string (``"3.x"``, ``"3.2"``, ``3``) by prefix.

        Anything that does not start with a known major version maps to the
        newest version.
        """
        text = str(raw)
        for version in (cls.DJANGO2, cls.DJANGO3):
            if text.startswith(version.value[0]):
                return version
        return cls.DJANGO4


@dataclass(eq=False)
class Project:
    """Root of the schema graph: one Django project.

    Attributes:
        name: Project (and settings module) name.
        description: Free-form description.
        version: Target Django version.
        channels: Generate Django Channels support.
        htmx: Integrate django-htmx.
        postgres: Enable the postgres-only field types.
        apps: Owned apps, in creation order.
        middlewares: This project's own middleware list.
        lock: Held by every builder mutation of this project.
    """

    name: str
    description: str = ""
    version: DjangoVersion = DjangoVersion.DJANGO4
    channels: bool = True
    htmx: bool = True
    postgres: bool = True
    apps: list[App] = field(default_factory=list)
    middlewares: list[str] = field(init=False)
    pillow: bool = field(default=True, init=False)
    lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.middlewares = compose_middlewares(htmx=self.htmx)


@dataclass(eq=False)
class App:
    """A Django app inside a project."""

    project: Project = field(repr=False)
    name: str
    models: list[Model] = field(default_factory=list)

    @property
    def concrete_models(self) -> list[Model]:
        """Models of this app that are not abstract."""
        return concrete_models(self.models)


@dataclass(eq=False)
class Model:
    """A Django model.

    Attributes:
        app: Owning app.
        name: Class name.
        abstract: Rendered with ``Meta.abstract = True``.
        fields: Owned scalar fields.
        relationships: Owned relational fields.
        parents: Base classes, either schema models or registered Django bases.
        primary_key: Name of the primary-key field, ``"pk"`` when implicit.
        name_field: Field used as the display name, ``"pk"`` until set.
        related_name: Default ``related_name`` stem, the model name.
    """

    app: App = field(repr=False)
    name: str
    abstract: bool = False
    fields: list[Field] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    parents: list[ModelParent] = field(default_factory=list)
    primary_key: str = PK_SENTINEL
    name_field: str = PK_SENTINEL
    related_name: str = ""

    def __post_init__(self) -> None:
        if not self.related_name:
            self.related_name = self.name

    @property
    def label(self) -> str:
        """The ``app_label.ModelName`` label of this model."""
        return related_label(self)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


@dataclass(eq=False)
class Field:
    """A scalar field on a model."""

    model: Model = field(repr=False)
    name: str
    type: FieldType
    args: str = ""
    editable: bool = True

    @property
    def is_postgres_field(self) -> bool:
        return self.type.is_postgres

    @property
    def storage_module(self) -> StorageModule:
        """Where the field class is imported from, derived from its type."""
        return storage_module(self.type)

    @property
    def test_default(self) -> str | tuple[str, str] | None:
        return self.type.test_default


@dataclass(eq=False)
class Relationship:
    """A relational field on a model, pointing at a schema or built-in model.

    A schema-model target is a non-owning reference; it dangles if the target
    model is removed from its app.
    """

    model: Model = field(repr=False)
    name: str
    type: RelationshipType
    to: RelationshipTarget = field(repr=False)
    args: str = ""

    @property
    def related_to(self) -> str:
        """The target's label, resolved at read time."""
        return related_label(self.to)


# A relationship target is either a model of the schema or a Django model.
RelationshipTarget = Model | BuiltInModel

# A model base class is either a model of the schema or a registered Django base.
ModelParent = Model | ParentModelType
