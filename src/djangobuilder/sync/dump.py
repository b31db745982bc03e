# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Flatten a schema graph into persisted records."""

from __future__ import annotations

import uuid
from collections.abc import Callable

from djangobuilder.model.entities import Model, ModelParent, Project, RelationshipTarget
from djangobuilder.registry.types import BuiltInModel
from djangobuilder.sync.records import (
    AppRecord,
    FieldRecord,
    ModelRecord,
    ProjectRecord,
    RecordSet,
    RelationshipRecord,
)

# ###############
# Public Interface
# ###############


def dump(
    project: Project,
    *,
    records: RecordSet | None = None,
    id_factory: Callable[[], str] | None = None,
) -> tuple[str, RecordSet]:
    """Write *project* and everything it owns into a record set.

    Args:
        project: The project to flatten.
        records: Record set to add to; a new one is created if omitted.
        id_factory: Produces fresh record ids; random UUIDs by default.

    Returns:
        The id of the project record and the record set holding it.
    """
    records = records if records is not None else RecordSet()
    new_id = id_factory or _random_id

    project_id = new_id()
    project_record = ProjectRecord(
        name=project.name,
        description=project.description,
        django_version=project.version.value,
        channels=project.channels,
        htmx=project.htmx,
        postgres=project.postgres,
    )
    for app in project.apps:
        app_id = new_id()
        app_record = AppRecord(name=app.name)
        for model in app.models:
            model_id = new_id()
            app_record.models[model_id] = True
            records.models[model_id] = _model_record(model, records, new_id)
        project_record.apps[app_id] = True
        records.apps[app_id] = app_record
    records.projects[project_id] = project_record
    return project_id, records


# ################
# Implementation
# ################


def _random_id() -> str:
    return uuid.uuid4().hex


def _model_record(model: Model, records: RecordSet, new_id: Callable[[], str]) -> ModelRecord:
    record = ModelRecord(
        name=model.name,
        abstract=model.abstract,
        parents=[_parent_ref(parent) for parent in model.parents],
        name_field=None if model.name_field == model.primary_key else model.name_field,
    )
    for model_field in model.fields:
        field_id = new_id()
        record.fields[field_id] = True
        records.fields[field_id] = FieldRecord(
            name=model_field.name,
            type=model_field.type.path,
            args=model_field.args,
            editable=model_field.editable,
        )
    for relationship in model.relationships:
        relationship_id = new_id()
        record.relationships[relationship_id] = True
        records.relationships[relationship_id] = RelationshipRecord(
            name=relationship.name,
            type=relationship.type.path,
            to=_target_ref(relationship.to),
            args=relationship.args,
        )
    return record


def _target_ref(target: RelationshipTarget) -> str:
    if isinstance(target, BuiltInModel):
        return target.path
    return target.label


def _parent_ref(parent: ModelParent) -> str:
    if isinstance(parent, Model):
        return parent.label
    return parent.path
