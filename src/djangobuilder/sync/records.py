# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Flat records exchanged with the persistence layer.

Each entity of the schema graph is persisted as one record keyed by an
opaque identifier. Parents list their children in membership maps
(``{child_id: true}``); types and targets are stored as raw dotted strings.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class RecordKind(str, Enum):
    """The five record collections."""

    PROJECT = "project"
    APP = "app"
    MODEL = "model"
    FIELD = "field"
    RELATIONSHIP = "relationship"


class ChangeType(str, Enum):
    """Kinds of change notification emitted by the persistence layer."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


class ProjectRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    description: str = ""
    django_version: str | int | float | None = None
    channels: bool = True
    htmx: bool = True
    postgres: bool = True
    apps: dict[str, Any] = Field(default_factory=dict)


class AppRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    models: dict[str, Any] = Field(default_factory=dict)


class ModelRecord(BaseModel):
    """A persisted model.

    ``parents`` holds ``app.Model`` labels of schema models or keys of the
    parent model type registry.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    abstract: bool = False
    fields: dict[str, Any] = Field(default_factory=dict)
    relationships: dict[str, Any] = Field(default_factory=dict)
    parents: list[str] = Field(default_factory=list)
    name_field: str | None = None


class FieldRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    type: str
    args: str = ""
    editable: bool = True


class RelationshipRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    type: str
    to: str
    args: str = ""


class RecordSet(BaseModel):
    """A snapshot of all persisted records, keyed by record id per collection."""

    projects: dict[str, ProjectRecord] = Field(default_factory=dict)
    apps: dict[str, AppRecord] = Field(default_factory=dict)
    models: dict[str, ModelRecord] = Field(default_factory=dict)
    fields: dict[str, FieldRecord] = Field(default_factory=dict)
    relationships: dict[str, RelationshipRecord] = Field(default_factory=dict)

    def apply_change(
        self,
        kind: RecordKind | str,
        change: ChangeType | str,
        record_id: str,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        """Apply one change notification to the snapshot.

        Args:
            kind: Which collection changed.
            change: ``added``, ``modified`` or ``removed``.
            record_id: Identifier of the changed record.
            data: The record's new contents; ignored for removals.

        Raises:
            ValueError: If *kind* or *change* is not understood, or an added or
                modified record comes without data.
            pydantic.ValidationError: If *data* does not match the record shape.
        """
        try:
            kind = RecordKind(kind)
            change = ChangeType(change)
        except ValueError:
            logger.error("Don't understand how to apply %s change to %s", change, kind)
            raise

        collection = getattr(self, _COLLECTIONS[kind])
        if change is ChangeType.REMOVED:
            logger.info("Removed %s %s", kind.value, record_id)
            collection.pop(record_id, None)
            return

        if data is None:
            raise ValueError(f"A {change.value} {kind.value} change needs record data")
        collection[record_id] = _RECORD_TYPES[kind].model_validate(dict(data))
        logger.debug("%s %s %s", change.value.capitalize(), kind.value, record_id)

    def remove_tree(self, kind: RecordKind | str, record_id: str) -> dict[RecordKind, list[str]]:
        """Remove a record together with every record it owns.

        The record's id is also dropped from the membership map of any record
        listing it as a child. Child ids without a record are ignored.

        Returns:
            The removed record ids, grouped by kind.

        Raises:
            ValueError: If *kind* is not understood.
        """
        kind = RecordKind(kind)
        removed: dict[RecordKind, list[str]] = {k: [] for k in RecordKind}
        self._remove_subtree(kind, record_id, removed)
        parent_kind = _PARENT_KIND.get(kind)
        if parent_kind is not None:
            membership = _MEMBERSHIP[kind]
            for parent in getattr(self, _COLLECTIONS[parent_kind]).values():
                getattr(parent, membership).pop(record_id, None)
        owned = sum(map(len, removed.values())) - len(removed[kind])
        logger.info("Removed %s %s and %d owned records", kind.value, record_id, owned)
        return removed

    def _remove_subtree(self, kind: RecordKind, record_id: str, removed: dict[RecordKind, list[str]]) -> None:
        record = getattr(self, _COLLECTIONS[kind]).pop(record_id, None)
        if record is None:
            return
        removed[kind].append(record_id)
        for child_kind in _CHILD_KINDS[kind]:
            for child_id in getattr(record, _MEMBERSHIP[child_kind]):
                self._remove_subtree(child_kind, child_id, removed)


# ################
# Implementation
# ################

_COLLECTIONS: dict[RecordKind, str] = {
    RecordKind.PROJECT: "projects",
    RecordKind.APP: "apps",
    RecordKind.MODEL: "models",
    RecordKind.FIELD: "fields",
    RecordKind.RELATIONSHIP: "relationships",
}

_RECORD_TYPES: dict[RecordKind, type[BaseModel]] = {
    RecordKind.PROJECT: ProjectRecord,
    RecordKind.APP: AppRecord,
    RecordKind.MODEL: ModelRecord,
    RecordKind.FIELD: FieldRecord,
    RecordKind.RELATIONSHIP: RelationshipRecord,
}

# Name of the membership map listing children of a kind on their parent record.
_MEMBERSHIP: dict[RecordKind, str] = {
    RecordKind.APP: "apps",
    RecordKind.MODEL: "models",
    RecordKind.FIELD: "fields",
    RecordKind.RELATIONSHIP: "relationships",
}

_CHILD_KINDS: dict[RecordKind, tuple[RecordKind, ...]] = {
    RecordKind.PROJECT: (RecordKind.APP,),
    RecordKind.APP: (RecordKind.MODEL,),
    RecordKind.MODEL: (RecordKind.FIELD, RecordKind.RELATIONSHIP),
    RecordKind.FIELD: (),
    RecordKind.RELATIONSHIP: (),
}

_PARENT_KIND: dict[RecordKind, RecordKind] = {
    RecordKind.APP: RecordKind.PROJECT,
    RecordKind.MODEL: RecordKind.APP,
    RecordKind.FIELD: RecordKind.MODEL,
    RecordKind.RELATIONSHIP: RecordKind.MODEL,
}
