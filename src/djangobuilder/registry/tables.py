# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""The registries of known field types, relationship types and Django models.

All registries are populated at import time and exposed as read-only
mappings keyed by the short class name.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TypeVar

from djangobuilder.errors import RegistryKeyNotFound
from djangobuilder.registry.types import BuiltInModel, FieldType, ParentModelType, RelationshipType

_MODELS = "django.db.models"
_POSTGRES = "django.contrib.postgres.fields"
_POSTGRES_RANGES = "django.contrib.postgres.fields.ranges"

# ###############
# Public Interface
# ###############

FIELD_TYPES: Mapping[str, FieldType]
RELATIONSHIP_TYPES: Mapping[str, RelationshipType]
BUILT_IN_MODELS: Mapping[str, BuiltInModel]
PARENT_MODEL_TYPES: Mapping[str, ParentModelType]

SLUG_TYPE = "SlugField"
AUTO_TYPES: tuple[str, ...] = ("AutoField", "BigAutoField")
META_PARAMS: tuple[str, ...] = ("abstract",)

FOREIGN_KEY = "ForeignKey"
ONE_TO_ONE = "OneToOneField"
MANY_TO_MANY = "ManyToManyField"


def get_field_type(key: str) -> FieldType:
    """Return the field type registered under *key*.

    Raises:
        RegistryKeyNotFound: If no field type is registered under *key*.
    """
    return _lookup(FIELD_TYPES, key, "field type")


def get_relationship_type(key: str) -> RelationshipType:
    """Return the relationship type registered under *key*.

    Raises:
        RegistryKeyNotFound: If *key* is not one of the three relationship types.
    """
    return _lookup(RELATIONSHIP_TYPES, key, "relationship type")


def get_built_in_model(key: str) -> BuiltInModel:
    """Return the built-in model registered under *key*.

    Raises:
        RegistryKeyNotFound: If no built-in model is registered under *key*.
    """
    return _lookup(BUILT_IN_MODELS, key, "built-in model")


def get_parent_model_type(key: str) -> ParentModelType:
    """Return the parent model type registered under *key*.

    Raises:
        RegistryKeyNotFound: If no parent model type is registered under *key*.
    """
    return _lookup(PARENT_MODEL_TYPES, key, "parent model type")


def resolve_field_type(raw: str) -> FieldType:
    """Resolve a loosely-structured type string such as ``django.db.models.CharField``.

    Only the last dot-separated segment is significant.
    """
    return get_field_type(last_segment(raw))


def resolve_relationship_type(raw: str) -> RelationshipType:
    """Resolve a type string such as ``models.ForeignKey`` by its last segment."""
    return get_relationship_type(last_segment(raw))


def resolve_built_in_model(raw: str) -> BuiltInModel:
    """Resolve ``auth.User`` or ``django.contrib.auth.models.User`` by its last segment."""
    return get_built_in_model(last_segment(raw))


def last_segment(raw: str) -> str:
    """Return the text after the last dot of *raw* (or *raw* itself)."""
    return raw.rsplit(".", 1)[-1]


# ################
# Implementation
# ################

_T = TypeVar("_T")


def _lookup(registry: Mapping[str, _T], key: str, label: str) -> _T:
    try:
        return registry[key]
    except KeyError:
        raise RegistryKeyNotFound(label, key) from None


def _field(
    name: str,
    test_default: str | tuple[str, str] | None = None,
    default_args: str | None = None,
    module: str = _MODELS,
    view_default: str | None = None,
) -> FieldType:
    return FieldType(
        name=name,
        path=f"{module}.{name}",
        default_args=default_args,
        test_default=test_default,
        view_default=view_default,
        is_postgres=module in (_POSTGRES, _POSTGRES_RANGES),
        is_postgres_range=module == _POSTGRES_RANGES,
    )


_USER_FIELDS = (("username", "username"), ("email", "username@tempurl.com"))

_FIELD_TYPE_LIST: list[FieldType] = [
    _field("EmailField", "'user@tempurl.com'"),
    _field("TextField", "'some\\ntext'", default_args="max_length=100"),
    _field("CharField", "'text'", default_args="max_length=30"),
    _field("SlugField", "'slug'"),
    _field("URLField", "'http://127.0.0.1'"),
    _field("UUIDField", "uuid.uuid4()"),
    _field("DateField", "'2022-01-01'"),
    _field("DateTimeField", "'2022-01-01:09:00:00'"),
    _field("TimeField", "time()"),
    _field("DurationField", "timedelta(days=1)"),
    _field("AutoField", default_args="primary_key=True"),
    _field("BigAutoField", default_args="primary_key=True"),
    _field("BigIntegerField", "1000"),
    _field("IntegerField", "1"),
    _field("SmallIntegerField", "1"),
    _field("PositiveIntegerField", "1"),
    _field("PositiveSmallIntegerField", "1"),
    _field("BooleanField", "True"),
    _field("DecimalField", "1.0", default_args="max_digits=10, decimal_places=2"),
    _field("FloatField", "1.1"),
    _field("BinaryField", "b'data'"),
    _field("FileField", "'aFile'", default_args='upload_to="upload/files/"'),
    _field("FilePathField", "'/tmp'"),
    _field("ImageField", "'anImage'", default_args='upload_to="upload/images/"'),
    _field("GenericIPAddressField", "'127.0.0.1'"),
    _field("JSONField", "'{\"value\": \"key\"}'", default_args="default=dict"),
    _field("ArrayField", "[1, 2, 3]", default_args="models.CharField(max_length=100)", module=_POSTGRES),
    _field("CICharField", "'text'", default_args="max_length=30", module=_POSTGRES),
    _field("CIEmailField", "'user@tempurl.com'", module=_POSTGRES),
    _field("CITextField", "'some\\ntext'", module=_POSTGRES),
    _field("HStoreField", "{}", module=_POSTGRES),
    _field("IntegerRangeField", ("0", "10"), module=_POSTGRES_RANGES, view_default="NumericRange(0, 10)"),
    _field("BigIntegerRangeField", ("0", "1000"), module=_POSTGRES_RANGES, view_default="NumericRange(0, 1000)"),
    _field(
        "DateTimeRangeField",
        ("'2022-01-01:09:00:00'", "'2022-02-02:09:00:00'"),
        module=_POSTGRES_RANGES,
        view_default="DateTimeTZRange()",
    ),
    _field("DateRangeField", ("'2022-01-01'", "'2022-02-02'"), module=_POSTGRES_RANGES, view_default="DateRange()"),
]

_RELATIONSHIP_TYPE_LIST: list[RelationshipType] = [
    RelationshipType(name=FOREIGN_KEY, path=f"{_MODELS}.{FOREIGN_KEY}", default_args="on_delete=models.CASCADE"),
    RelationshipType(name=ONE_TO_ONE, path=f"{_MODELS}.{ONE_TO_ONE}", default_args="on_delete=models.CASCADE"),
    RelationshipType(name=MANY_TO_MANY, path=f"{_MODELS}.{MANY_TO_MANY}"),
]

_BUILT_IN_MODEL_LIST: list[BuiltInModel] = [
    BuiltInModel(name="User", label="auth.User", path="django.contrib.auth.models.User", fields=_USER_FIELDS),
    BuiltInModel(
        name="AbstractUser",
        label="auth.AbstractUser",
        path="django.contrib.auth.models.AbstractUser",
        fields=_USER_FIELDS,
    ),
    BuiltInModel(
        name="AbstractBaseUser",
        label="auth.AbstractBaseUser",
        path="django.contrib.auth.models.AbstractBaseUser",
        fields=_USER_FIELDS,
    ),
    BuiltInModel(
        name="Group",
        label="auth.Group",
        path="django.contrib.auth.models.Group",
        fields=(("name", "group"),),
    ),
    BuiltInModel(
        name="ContentType",
        label="contenttypes.ContentType",
        path="django.contrib.contenttypes.models.ContentType",
    ),
]

_PARENT_MODEL_TYPE_LIST: list[ParentModelType] = [
    ParentModelType(name="AbstractUser", category="django", path="django.contrib.auth.models.AbstractUser"),
    ParentModelType(name="AbstractBaseUser", category="django", path="django.contrib.auth.models.AbstractBaseUser"),
]

FIELD_TYPES = MappingProxyType({t.name: t for t in _FIELD_TYPE_LIST})
RELATIONSHIP_TYPES = MappingProxyType({t.name: t for t in _RELATIONSHIP_TYPE_LIST})
BUILT_IN_MODELS = MappingProxyType({m.name: m for m in _BUILT_IN_MODEL_LIST})
PARENT_MODEL_TYPES = MappingProxyType({p.name: p for p in _PARENT_MODEL_TYPE_LIST})

# The identity model a relationship falls back to when its target is unknown.
AUTH_USER: BuiltInModel = BUILT_IN_MODELS["User"]
