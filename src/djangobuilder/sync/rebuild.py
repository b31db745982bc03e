# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rebuild schema graphs from a snapshot of persisted records.

Projects are rebuilt from scratch on every call. All apps and models of a
project are created before any field, relationship or parent, so that
relationships and parents can refer to models declared later in the records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from djangobuilder.builder import (
    add_app,
    add_field,
    add_model,
    add_parent,
    add_relationship,
    create_project,
    find_model,
    set_name_field,
)
from djangobuilder.config import BuilderConfig
from djangobuilder.errors import ReferenceNotFound, RegistryKeyNotFound
from djangobuilder.model.entities import App, DjangoVersion, Model, ModelParent, Project, RelationshipTarget
from djangobuilder.registry.tables import (
    AUTH_USER,
    get_parent_model_type,
    last_segment,
    resolve_built_in_model,
    resolve_field_type,
    resolve_relationship_type,
)
from djangobuilder.sync.records import ModelRecord, ProjectRecord, RecordKind, RecordSet

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass
class RebuildResult:
    """The graphs rebuilt from a record set.

    Attributes:
        projects: Rebuilt projects keyed by project record id.
        record_ids: Record id of every rebuilt entity, keyed by the entity.
    """

    projects: dict[str, Project] = field(default_factory=dict)
    record_ids: dict[object, str] = field(default_factory=dict)

    def id_of(self, entity: object) -> str | None:
        """Return the record id an entity was rebuilt from, if any."""
        return self.record_ids.get(entity)

    def sub_ids(self, entity: Project | App | Model) -> dict[RecordKind, list[str]]:
        """Return the record ids of everything *entity* owns, grouped by kind.

        The entity's own id is not included. Entities that were not rebuilt
        from a record (for example ones added afterwards) are left out.
        """
        owned: dict[RecordKind, list[str]] = {
            RecordKind.APP: [],
            RecordKind.MODEL: [],
            RecordKind.FIELD: [],
            RecordKind.RELATIONSHIP: [],
        }
        if isinstance(entity, Project):
            apps = list(entity.apps)
            models = [model for app in apps for model in app.models]
        elif isinstance(entity, App):
            apps, models = [], list(entity.models)
        else:
            apps, models = [], [entity]

        self._collect(owned[RecordKind.APP], apps)
        self._collect(owned[RecordKind.MODEL], [model for model in models if model is not entity])
        for model in models:
            self._collect(owned[RecordKind.FIELD], model.fields)
            self._collect(owned[RecordKind.RELATIONSHIP], model.relationships)
        return owned

    def _collect(self, ids: list[str], entities: list) -> None:
        for entity in entities:
            record_id = self.record_ids.get(entity)
            if record_id is not None:
                ids.append(record_id)


def rebuild(records: RecordSet, config: BuilderConfig | None = None) -> RebuildResult:
    """Rebuild every project in *records*.

    Child ids listed by a parent record but absent from the snapshot are
    logged and skipped; the snapshot may simply not have caught up yet.

    Args:
        records: The snapshot to rebuild from.
        config: Rebuild options; defaults to :class:`BuilderConfig` defaults.

    Returns:
        A :class:`RebuildResult` with the projects and entity ids.

    Raises:
        RegistryKeyNotFound: If a field or relationship type, a parent, or (in
            strict mode) a relationship target cannot be resolved.
        InvariantViolation: If the records break a structural invariant, such
            as two fields of one model sharing a name.
    """
    result = RebuildResult()
    rebuilder = _Rebuilder(records, config or BuilderConfig(), result)
    for project_id, project_record in records.projects.items():
        result.projects[project_id] = rebuilder.rebuild_project(project_id, project_record)
    return result


def rebuild_project(records: RecordSet, project_id: str, config: BuilderConfig | None = None) -> Project:
    """Rebuild the single project stored under *project_id*.

    Raises:
        ReferenceNotFound: If the snapshot has no such project.
    """
    project_record = records.projects.get(project_id)
    if project_record is None:
        raise ReferenceNotFound(project_id, "record set", kind="project")
    rebuilder = _Rebuilder(records, config or BuilderConfig(), RebuildResult())
    return rebuilder.rebuild_project(project_id, project_record)


# ################
# Implementation
# ################


class _Rebuilder:
    """Turns the records of one snapshot into projects."""

    def __init__(self, records: RecordSet, config: BuilderConfig, result: RebuildResult) -> None:
        self._records = records
        self._config = config
        self._result = result

    def rebuild_project(self, project_id: str, record: ProjectRecord) -> Project:
        if record.django_version is None:
            version = self._config.default_version
        else:
            version = DjangoVersion.from_raw(record.django_version)
        project = create_project(
            record.name,
            record.description,
            version,
            channels=record.channels,
            htmx=record.htmx,
            postgres=record.postgres,
        )
        self._result.record_ids[project] = project_id

        pending: list[tuple[Model, ModelRecord]] = []
        for app_id in record.apps:
            app_record = self._records.apps.get(app_id)
            if app_record is None:
                logger.warning("Missing app %s from project %s", app_id, project_id)
                continue
            app = add_app(project, app_record.name)
            self._result.record_ids[app] = app_id
            for model_id in app_record.models:
                model_record = self._records.models.get(model_id)
                if model_record is None:
                    logger.warning("Missing model %s from app %s", model_id, app_id)
                    continue
                model = add_model(app, model_record.name, model_record.abstract)
                self._result.record_ids[model] = model_id
                pending.append((model, model_record))

        for model, model_record in pending:
            self._populate_model(project, model, model_record)

        logger.info("Rebuilt project %s (%s) with %d apps", record.name, project_id, len(project.apps))
        return project

    def _populate_model(self, project: Project, model: Model, record: ModelRecord) -> None:
        for field_id in record.fields:
            field_record = self._records.fields.get(field_id)
            if field_record is None:
                logger.warning("Missing field %s from model %s", field_id, model.name)
                continue
            field_type = resolve_field_type(field_record.type)
            args = field_record.args
            if not args and self._config.apply_default_args:
                args = field_type.default_args or ""
            new_field = add_field(model, field_record.name, field_type, args, field_record.editable)
            self._result.record_ids[new_field] = field_id

        for relationship_id in record.relationships:
            relationship_record = self._records.relationships.get(relationship_id)
            if relationship_record is None:
                logger.warning("Missing relationship %s from model %s", relationship_id, model.name)
                continue
            relationship_type = resolve_relationship_type(relationship_record.type)
            args = relationship_record.args
            if not args and self._config.apply_default_args:
                args = relationship_type.default_args or ""
            relationship = add_relationship(
                model,
                relationship_record.name,
                relationship_type,
                self._resolve_target(project, relationship_record.to),
                args,
            )
            self._result.record_ids[relationship] = relationship_id

        for raw_parent in record.parents:
            add_parent(model, self._resolve_parent(project, raw_parent))

        if record.name_field is None:
            return
        if record.name_field in model.field_names:
            set_name_field(model, record.name_field)
        else:
            logger.warning(
                "Name field %s of model %s was not rebuilt, keeping %s", record.name_field, model.name, model.name_field
            )

    def _resolve_target(self, project: Project, raw: str) -> RelationshipTarget:
        """Resolve a raw ``to`` string: schema model first, then built-in model."""
        try:
            return find_model(project, raw)
        except ReferenceNotFound:
            pass
        try:
            return resolve_built_in_model(raw)
        except RegistryKeyNotFound:
            if self._config.strict_relationship_targets:
                raise
        logger.warning("Unknown relationship target %r in project %s, using %s", raw, project.name, AUTH_USER.label)
        return AUTH_USER

    def _resolve_parent(self, project: Project, raw: str) -> ModelParent:
        try:
            return find_model(project, raw)
        except ReferenceNotFound:
            return get_parent_model_type(last_segment(raw))
