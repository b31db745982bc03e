# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Builder API: the sanctioned way to create and mutate a schema graph.

Every mutation validates its inputs before touching the graph and runs
under the owning project's lock, so a failed call leaves the graph as it
was and concurrent writers on one project are serialized.
"""

from __future__ import annotations

import logging

from djangobuilder.errors import InvariantViolation, ReferenceNotFound, RegistryKeyNotFound
from djangobuilder.model.derivation import related_label
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
from djangobuilder.registry.tables import (
    BUILT_IN_MODELS,
    FIELD_TYPES,
    PARENT_MODEL_TYPES,
    RELATIONSHIP_TYPES,
    get_built_in_model,
    get_field_type,
    get_parent_model_type,
    get_relationship_type,
)
from djangobuilder.registry.types import BuiltInModel, FieldType, ParentModelType, RelationshipType

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def create_project(
    name: str,
    description: str = "",
    version: DjangoVersion = DjangoVersion.DJANGO4,
    *,
    channels: bool = True,
    htmx: bool = True,
    postgres: bool = True,
) -> Project:
    """Create an empty project with its own middleware list."""
    project = Project(
        name=name,
        description=description,
        version=version,
        channels=channels,
        htmx=htmx,
        postgres=postgres,
    )
    logger.debug("Created project %s (%s)", name, version.value)
    return project


def add_app(project: Project, name: str) -> App:
    """Append a new app to *project* and return it.

    Raises:
        InvariantViolation: If the project already has an app called *name*.
    """
    with project.lock:
        if any(app.name == name for app in project.apps):
            raise InvariantViolation(f"Project {project.name} already has an app named {name}")
        app = App(project=project, name=name)
        project.apps.append(app)
    logger.debug("Added app %s to project %s", name, project.name)
    return app


def add_model(app: App, name: str, abstract: bool = False) -> Model:
    """Append a new model to *app* and return it.

    Raises:
        InvariantViolation: If the app already has a model called *name*.
    """
    with app.project.lock:
        if any(model.name == name for model in app.models):
            raise InvariantViolation(f"App {app.name} already has a model named {name}")
        model = Model(app=app, name=name, abstract=abstract)
        app.models.append(model)
    logger.debug("Added model %s to app %s", name, app.name)
    return model


def add_field(
    model: Model,
    name: str,
    field_type: FieldType | str,
    args: str = "",
    editable: bool = True,
) -> Field:
    """Append a new scalar field to *model* and return it.

    Args:
        model: The owning model.
        name: Attribute name, unique among the model's fields and relationships.
        field_type: A registered field type or its registry key.
        args: Construction arguments, rendered verbatim.
        editable: Whether the field appears in generated forms.

    Raises:
        RegistryKeyNotFound: If *field_type* is not a registered field type.
        InvariantViolation: If *name* is already taken on the model.
    """
    resolved = _registered(field_type, FIELD_TYPES, get_field_type, "field type")
    with _project_of(model).lock:
        _check_attribute_free(model, name)
        new_field = Field(model=model, name=name, type=resolved, args=args, editable=editable)
        model.fields.append(new_field)
    logger.debug("Added field %s.%s (%s)", model.name, name, resolved.name)
    return new_field


def add_relationship(
    model: Model,
    name: str,
    relationship_type: RelationshipType | str,
    target: RelationshipTarget | str,
    args: str = "",
) -> Relationship:
    """Append a new relationship to *model* and return it.

    Args:
        model: The owning model.
        name: Attribute name, unique among the model's fields and relationships.
        relationship_type: A registered relationship type or its registry key.
        target: A model of the same project, a built-in model, or the
            registry key of a built-in model.
        args: Construction arguments, rendered verbatim.

    Raises:
        RegistryKeyNotFound: If the type or a built-in target is not registered.
        InvariantViolation: If *name* is taken, or *target* is neither a model nor
            a built-in model, or belongs to another project.
    """
    resolved_type = _registered(relationship_type, RELATIONSHIP_TYPES, get_relationship_type, "relationship type")
    if isinstance(target, str):
        resolved_target: RelationshipTarget = get_built_in_model(target)
    elif isinstance(target, BuiltInModel):
        resolved_target = _registered(target, BUILT_IN_MODELS, get_built_in_model, "built-in model")
    elif isinstance(target, Model):
        resolved_target = target
    else:
        raise InvariantViolation(
            f"Relationship {model.name}.{name} must target a model or a built-in model, not {type(target).__name__}"
        )
    project = _project_of(model)
    with project.lock:
        _check_attribute_free(model, name)
        if isinstance(resolved_target, Model) and _project_of(resolved_target) is not project:
            raise InvariantViolation(
                f"Relationship {model.name}.{name} targets {resolved_target.name}, "
                f"which is not part of project {project.name}"
            )
        relationship = Relationship(model=model, name=name, type=resolved_type, to=resolved_target, args=args)
        model.relationships.append(relationship)
    logger.debug("Added relationship %s.%s -> %s", model.name, name, related_label(resolved_target))
    return relationship


def add_parent(model: Model, parent: ModelParent | str) -> None:
    """Declare *parent* as a base class of *model*.

    Raises:
        RegistryKeyNotFound: If *parent* is not a registered parent model type.
        InvariantViolation: If the parent is neither a model nor a parent model
            type, is the model itself, belongs to another project, or is
            already declared.
    """
    if isinstance(parent, str):
        resolved: ModelParent = get_parent_model_type(parent)
    elif isinstance(parent, ParentModelType):
        resolved = _registered(parent, PARENT_MODEL_TYPES, get_parent_model_type, "parent model type")
    elif isinstance(parent, Model):
        resolved = parent
    else:
        raise InvariantViolation(
            f"Model {model.name} can only inherit from a model or a parent model type, not {type(parent).__name__}"
        )
    project = _project_of(model)
    with project.lock:
        if isinstance(resolved, Model):
            if resolved is model:
                raise InvariantViolation(f"Model {model.name} cannot be its own parent")
            if _project_of(resolved) is not project:
                raise InvariantViolation(
                    f"Parent {resolved.name} of {model.name} is not part of project {project.name}"
                )
        if resolved in model.parents:
            raise InvariantViolation(f"Model {model.name} already inherits from {resolved.name}")
        model.parents.append(resolved)


def set_name_field(model: Model, field_name: str) -> None:
    """Use the field called *field_name* as the model's display name.

    Raises:
        ReferenceNotFound: If the model has no such field. ``name_field`` is
            left unchanged.
    """
    with _project_of(model).lock:
        if field_name not in model.field_names:
            raise ReferenceNotFound(field_name, model.name)
        model.name_field = field_name


def remove_app(project: Project, app: App) -> None:
    """Remove *app*, and with it every model it owns, from *project*."""
    with project.lock:
        _remove(project.apps, app, project.name, "app")


def remove_model(app: App, model: Model) -> None:
    """Remove *model* from *app*.

    Relationships elsewhere that target the model are left dangling.
    """
    with app.project.lock:
        _remove(app.models, model, app.name, "model")


def remove_field(model: Model, field: Field) -> None:
    """Remove *field* from *model*, resetting the name field if it pointed at it."""
    with _project_of(model).lock:
        _remove(model.fields, field, model.name, "field")
        if model.name_field == field.name:
            model.name_field = PK_SENTINEL


def remove_relationship(model: Model, relationship: Relationship) -> None:
    with _project_of(model).lock:
        _remove(model.relationships, relationship, model.name, "relationship")


def get_app(project: Project, name: str) -> App:
    """Return the app called *name*, raising ReferenceNotFound if absent."""
    for app in project.apps:
        if app.name == name:
            return app
    raise ReferenceNotFound(name, project.name, kind="app")


def get_model(app: App, name: str) -> Model:
    """Return the model called *name*, raising ReferenceNotFound if absent."""
    for model in app.models:
        if model.name == name:
            return model
    raise ReferenceNotFound(name, app.name, kind="model")


def find_model(project: Project, label: str) -> Model:
    """Return the model with the ``app_label.ModelName`` *label*.

    Raises:
        ReferenceNotFound: If the label is malformed or names no model of the project.
    """
    app_name, _, model_name = label.rpartition(".")
    if not app_name:
        raise ReferenceNotFound(label, project.name, kind="model")
    return get_model(get_app(project, app_name), model_name)


# ################
# Implementation
# ################


def _project_of(model: Model) -> Project:
    return model.app.project


def _check_attribute_free(model: Model, name: str) -> None:
    """Field and relationship names share one namespace on a model."""
    taken = {f.name for f in model.fields} | {r.name for r in model.relationships}
    if name in taken:
        raise InvariantViolation(f"Model {model.name} already has an attribute named {name}")


def _remove(items: list, item: object, owner: str, kind: str) -> None:
    for index, existing in enumerate(items):
        if existing is item:
            del items[index]
            logger.debug("Removed %s %s from %s", kind, getattr(item, "name", item), owner)
            return
    raise ReferenceNotFound(getattr(item, "name", str(item)), owner, kind=kind)


def _registered(entry, registry, lookup, label: str):
    """Return the registry entry for a key, or for an entry equal to a registered one."""
    if isinstance(entry, str):
        return lookup(entry)
    if registry.get(getattr(entry, "name", None)) == entry:
        return registry[entry.name]
    raise RegistryKeyNotFound(label, getattr(entry, "name", repr(entry)))
