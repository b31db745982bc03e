# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for rebuilding schema graphs from records, and dumping them back."""

import itertools
import logging

import pytest

from djangobuilder import (
    InvariantViolation,
    ReferenceNotFound,
    RegistryKeyNotFound,
    add_app,
    add_field,
    add_model,
    add_parent,
    add_relationship,
    create_project,
    set_name_field,
)
from djangobuilder.config import BuilderConfig
from djangobuilder.model import DjangoVersion, Model, Project
from djangobuilder.registry import AUTH_USER, get_built_in_model, get_parent_model_type
from djangobuilder.sync import (
    AppRecord,
    FieldRecord,
    ModelRecord,
    ProjectRecord,
    RecordKind,
    RecordSet,
    RelationshipRecord,
    dump,
    rebuild,
    rebuild_project,
)

# ###############
# Test Helpers
# ###############


def _records(
    *,
    fields: dict[str, FieldRecord] | None = None,
    relationships: dict[str, RelationshipRecord] | None = None,
    version: str | None = "4.x",
) -> RecordSet:
    """A project 'site' with app 'shop' holding model 'Order' and the given children."""
    fields = fields or {}
    relationships = relationships or {}
    return RecordSet(
        projects={"p1": ProjectRecord(name="site", django_version=version, apps={"a1": True})},
        apps={"a1": AppRecord(name="shop", models={"m1": True})},
        models={
            "m1": ModelRecord(
                name="Order",
                fields={key: True for key in fields},
                relationships={key: True for key in relationships},
            )
        },
        fields=fields,
        relationships=relationships,
    )


def _order(records: RecordSet, config: BuilderConfig | None = None) -> Model:
    return rebuild(records, config).projects["p1"].apps[0].models[0]


def _counter():
    counter = itertools.count(1)
    return lambda: f"id{next(counter)}"


def _shape(project: Project) -> list:
    """Structural shape of a project: names, flags, type keys and target labels."""
    return [
        project.name,
        project.description,
        project.version,
        (project.channels, project.htmx, project.postgres),
        [
            (
                app.name,
                [
                    (
                        model.name,
                        model.abstract,
                        model.name_field,
                        [_parent_label(p) for p in model.parents],
                        [(f.name, f.type.name, f.args, f.editable) for f in model.fields],
                        [(r.name, r.type.name, r.related_to, r.args) for r in model.relationships],
                    )
                    for model in app.models
                ],
            )
            for app in project.apps
        ],
    ]


def _parent_label(parent) -> str:
    return parent.label if isinstance(parent, Model) else parent.name


# ###############
# Rebuild
# ###############


def test_rebuild_minimal_project() -> None:
    result = rebuild(_records())
    project = result.projects["p1"]
    assert project.name == "site"
    assert project.version is DjangoVersion.DJANGO4
    assert [app.name for app in project.apps] == ["shop"]
    assert [model.name for model in project.apps[0].models] == ["Order"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2.x", DjangoVersion.DJANGO2),
        ("3.x", DjangoVersion.DJANGO3),
        ("4.x", DjangoVersion.DJANGO4),
        ("9", DjangoVersion.DJANGO4),
    ],
)
def test_rebuild_maps_version_by_prefix(raw: str, expected: DjangoVersion) -> None:
    assert rebuild(_records(version=raw)).projects["p1"].version is expected


def test_missing_version_uses_configured_default() -> None:
    config = BuilderConfig(default_version=DjangoVersion.DJANGO3)
    assert rebuild(_records(version=None), config).projects["p1"].version is DjangoVersion.DJANGO3


def test_record_ids_are_tracked() -> None:
    records = _records(fields={"f1": FieldRecord(name="total", type="django.db.models.DecimalField")})
    result = rebuild(records)
    project = result.projects["p1"]
    order = project.apps[0].models[0]
    assert result.id_of(project) == "p1"
    assert result.id_of(project.apps[0]) == "a1"
    assert result.id_of(order) == "m1"
    assert result.id_of(order.fields[0]) == "f1"
    assert result.id_of(create_project("other")) is None


def test_sub_ids_group_owned_records_by_kind() -> None:
    records = _records(
        fields={"f1": FieldRecord(name="total", type="DecimalField")},
        relationships={"r1": RelationshipRecord(name="customer", type="ForeignKey", to="auth.User")},
    )
    result = rebuild(records)
    project = result.projects["p1"]
    order = project.apps[0].models[0]
    add_field(order, "note", "TextField")

    expected = {
        RecordKind.APP: ["a1"],
        RecordKind.MODEL: ["m1"],
        RecordKind.FIELD: ["f1"],
        RecordKind.RELATIONSHIP: ["r1"],
    }
    assert result.sub_ids(project) == expected
    assert result.sub_ids(project.apps[0]) == {**expected, RecordKind.APP: []}
    assert result.sub_ids(order) == {**expected, RecordKind.APP: [], RecordKind.MODEL: []}


def test_fields_resolve_dotted_types() -> None:
    records = _records(
        fields={
            "f1": FieldRecord(name="total", type="django.db.models.DecimalField", args="max_digits=8"),
            "f2": FieldRecord(name="tags", type="ArrayField", editable=False),
        }
    )
    order = _order(records)
    assert [(f.name, f.type.name, f.args) for f in order.fields] == [
        ("total", "DecimalField", "max_digits=8"),
        ("tags", "ArrayField", ""),
    ]
    assert not order.fields[1].editable


def test_unknown_field_type_is_an_error() -> None:
    records = _records(fields={"f1": FieldRecord(name="price", type="djmoney.models.fields.MoneyField")})
    with pytest.raises(RegistryKeyNotFound, match="MoneyField"):
        rebuild(records)


def test_unknown_relationship_type_is_an_error() -> None:
    relationship = RelationshipRecord(name="x", type="models.GenericRelation", to="auth.User")
    records = _records(relationships={"r1": relationship})
    with pytest.raises(RegistryKeyNotFound, match="GenericRelation"):
        rebuild(records)


def test_relationship_targets_built_in_models() -> None:
    records = _records(
        relationships={
            "r1": RelationshipRecord(name="buyer", type="models.ForeignKey", to="auth.User"),
            "r2": RelationshipRecord(name="groups", type="ManyToManyField", to="django.contrib.auth.models.Group"),
        }
    )
    order = _order(records)
    assert order.relationships[0].to is AUTH_USER
    assert order.relationships[1].to is get_built_in_model("Group")


def test_relationship_targets_schema_models() -> None:
    records = _records(relationships={"r1": RelationshipRecord(name="parent", type="ForeignKey", to="shop.Order")})
    order = _order(records)
    assert order.relationships[0].to is order
    assert order.relationships[0].related_to == "shop.Order"


def test_relationship_may_target_a_model_declared_later() -> None:
    records = RecordSet(
        projects={"p1": ProjectRecord(name="site", apps={"a1": True, "a2": True})},
        apps={
            "a1": AppRecord(name="shop", models={"m1": True}),
            "a2": AppRecord(name="billing", models={"m2": True}),
        },
        models={
            "m1": ModelRecord(name="Order", relationships={"r1": True}),
            "m2": ModelRecord(name="Invoice"),
        },
        relationships={"r1": RelationshipRecord(name="invoice", type="OneToOneField", to="billing.Invoice")},
    )
    project = rebuild(records).projects["p1"]
    relationship = project.apps[0].models[0].relationships[0]
    assert relationship.to is project.apps[1].models[0]


def test_unknown_target_falls_back_to_auth_user(caplog: pytest.LogCaptureFixture) -> None:
    records = _records(relationships={"r1": RelationshipRecord(name="owner", type="ForeignKey", to="crm.Customer")})
    with caplog.at_level(logging.WARNING, logger="djangobuilder"):
        order = _order(records)
    assert order.relationships[0].to is AUTH_USER
    assert "crm.Customer" in caplog.text


def test_unknown_target_fails_in_strict_mode() -> None:
    records = _records(relationships={"r1": RelationshipRecord(name="owner", type="ForeignKey", to="crm.Customer")})
    with pytest.raises(RegistryKeyNotFound, match="Customer"):
        rebuild(records, BuilderConfig(strict_relationship_targets=True))


def test_default_args_applied_only_when_configured() -> None:
    records = _records(
        fields={"f1": FieldRecord(name="title", type="CharField")},
        relationships={"r1": RelationshipRecord(name="buyer", type="ForeignKey", to="auth.User")},
    )
    plain = _order(records)
    assert plain.fields[0].args == ""
    assert plain.relationships[0].args == ""

    applied = _order(records, BuilderConfig(apply_default_args=True))
    assert applied.fields[0].args == "max_length=30"
    assert applied.relationships[0].args == "on_delete=models.CASCADE"


def test_parents_and_name_field() -> None:
    records = RecordSet(
        projects={"p1": ProjectRecord(name="site", apps={"a1": True})},
        apps={"a1": AppRecord(name="accounts", models={"m1": True, "m2": True})},
        models={
            "m1": ModelRecord(
                name="Member",
                parents=["django.contrib.auth.models.AbstractUser", "accounts.Base"],
                fields={"f1": True},
                name_field="nickname",
            ),
            "m2": ModelRecord(name="Base", abstract=True),
        },
        fields={"f1": FieldRecord(name="nickname", type="CharField")},
    )
    app = rebuild(records).projects["p1"].apps[0]
    member, base = app.models
    assert member.parents == [get_parent_model_type("AbstractUser"), base]
    assert member.name_field == "nickname"
    assert app.concrete_models == [member]


def test_missing_children_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    records = RecordSet(
        projects={"p1": ProjectRecord(name="site", apps={"a1": True, "gone": True})},
        apps={"a1": AppRecord(name="shop", models={"m1": True, "m-gone": True})},
        models={"m1": ModelRecord(name="Order", fields={"f-gone": True}, relationships={"r-gone": True})},
    )
    with caplog.at_level(logging.WARNING, logger="djangobuilder"):
        project = rebuild(records).projects["p1"]
    order = project.apps[0].models[0]
    assert len(project.apps) == 1
    assert len(project.apps[0].models) == 1
    assert order.fields == [] and order.relationships == []
    for missing in ("gone", "m-gone", "f-gone", "r-gone"):
        assert missing in caplog.text


def test_name_field_of_missing_field_keeps_the_primary_key(caplog: pytest.LogCaptureFixture) -> None:
    """A name field whose field record has not arrived does not abort the rebuild."""
    records = RecordSet(
        projects={"p1": ProjectRecord(name="site", apps={"a1": True})},
        apps={"a1": AppRecord(name="shop", models={"m1": True, "m2": True})},
        models={
            "m1": ModelRecord(name="Order", fields={"f-gone": True}, name_field="title"),
            "m2": ModelRecord(name="Customer"),
        },
    )
    with caplog.at_level(logging.WARNING, logger="djangobuilder"):
        project = rebuild(records).projects["p1"]
    order, customer = project.apps[0].models
    assert order.name_field == "pk"
    assert customer.name == "Customer"
    assert "Name field title of model Order was not rebuilt" in caplog.text


def test_duplicate_names_in_records_are_an_error() -> None:
    records = _records(
        fields={
            "f1": FieldRecord(name="total", type="IntegerField"),
            "f2": FieldRecord(name="total", type="FloatField"),
        }
    )
    with pytest.raises(InvariantViolation):
        rebuild(records)


def test_rebuild_single_project() -> None:
    project = rebuild_project(_records(), "p1")
    assert project.name == "site"
    with pytest.raises(ReferenceNotFound):
        rebuild_project(_records(), "p2")


def test_rebuilt_projects_have_their_own_middlewares() -> None:
    records = RecordSet(
        projects={"p1": ProjectRecord(name="one", htmx=True), "p2": ProjectRecord(name="two", htmx=True)}
    )
    projects = rebuild(records).projects
    projects["p1"].middlewares.clear()
    assert len(projects["p2"].middlewares) == 8


# ###############
# Round Trip
# ###############


def _sample_project() -> Project:
    project = create_project("shopsite", "Online shop", DjangoVersion.DJANGO3, channels=False, htmx=True)
    shop = add_app(project, "shop")
    accounts = add_app(project, "accounts")
    base = add_model(shop, "TimeStamped", abstract=True)
    add_field(base, "created", "DateTimeField", "auto_now_add=True", editable=False)
    order = add_model(shop, "Order")
    add_parent(order, base)
    add_field(order, "number", "CharField", "max_length=12")
    add_field(order, "total", "DecimalField", "max_digits=10, decimal_places=2")
    add_field(order, "period", "DateRangeField")
    set_name_field(order, "number")
    member = add_model(accounts, "Member")
    add_parent(member, "AbstractUser")
    add_relationship(order, "customer", "ForeignKey", member, "on_delete=models.CASCADE")
    add_relationship(order, "created_by", "ForeignKey", AUTH_USER, "on_delete=models.PROTECT")
    add_relationship(member, "groups_extra", "ManyToManyField", "Group")
    return project


def test_dump_assigns_ids_and_membership() -> None:
    project_id, records = dump(_sample_project(), id_factory=_counter())
    assert project_id in records.projects
    project_record = records.projects[project_id]
    assert project_record.django_version == "3.x"
    assert len(project_record.apps) == 2
    assert len(records.models) == 3
    assert len(records.fields) == 4
    assert {r.to for r in records.relationships.values()} == {
        "accounts.Member",
        "django.contrib.auth.models.User",
        "django.contrib.auth.models.Group",
    }


def test_round_trip_preserves_structure() -> None:
    original = _sample_project()
    project_id, records = dump(original, id_factory=_counter())

    rebuilt = rebuild(records).projects[project_id]

    assert rebuilt is not original
    assert _shape(rebuilt) == _shape(original)


def test_round_trip_through_plain_data() -> None:
    """Records survive conversion to plain dicts, as stored by the persistence layer."""
    original = _sample_project()
    project_id, records = dump(original)
    restored = RecordSet.model_validate(records.model_dump())
    assert _shape(rebuild_project(restored, project_id)) == _shape(original)


def test_dump_into_existing_record_set() -> None:
    _, records = dump(create_project("one"))
    second_id, records = dump(create_project("two"), records=records)
    assert len(records.projects) == 2
    assert rebuild(records).projects[second_id].name == "two"
