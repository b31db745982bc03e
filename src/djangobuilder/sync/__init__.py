# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exchange of schema graphs with the persistence layer as flat records."""

from djangobuilder.sync.dump import dump
from djangobuilder.sync.rebuild import RebuildResult, rebuild, rebuild_project
from djangobuilder.sync.records import (
    AppRecord,
    ChangeType,
    FieldRecord,
    ModelRecord,
    ProjectRecord,
    RecordKind,
    RecordSet,
    RelationshipRecord,
)

__all__ = [
    "AppRecord",
    "ChangeType",
    "FieldRecord",
    "ModelRecord",
    "ProjectRecord",
    "RebuildResult",
    "RecordKind",
    "RecordSet",
    "RelationshipRecord",
    "dump",
    "rebuild",
    "rebuild_project",
]
