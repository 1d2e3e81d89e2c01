# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

"""Conversion between ORM models and their API representation.

The ``*_to_model`` functions never modify the record they are given. They
merge the attributes that are explicitly set in the update onto a transient
copy and validate the result as a whole.
"""

from __future__ import annotations

from uuid import uuid4

from worktypes.errors import BadParameterError
from worktypes.models.link_type import WorkItemLinkType, check_valid_topology
from worktypes.models.work_item_type import WorkItemType
from worktypes.schemas.link_type import (
    LinkTypeRelationships,
    WorkItemLinkTypeCreate,
    WorkItemLinkTypeResponse,
    WorkItemLinkTypeUpdate,
)
from worktypes.schemas.work_item_type import (
    WorkItemTypeCreate,
    WorkItemTypeResponse,
    WorkItemTypeUpdate,
)

# ---------------------------------------------------------------------------
# Work item link types
# ---------------------------------------------------------------------------


def convert_link_type_from_model(link_type: WorkItemLinkType) -> WorkItemLinkTypeResponse:
    return WorkItemLinkTypeResponse(
        id=link_type.id,
        name=link_type.name,
        description=link_type.description,
        version=link_type.version,
        topology=link_type.topology,
        forward_name=link_type.forward_name,
        reverse_name=link_type.reverse_name,
        relationships=LinkTypeRelationships(
            link_category=link_type.link_category_id,
            source_type=link_type.source_type_id,
            target_type=link_type.target_type_id,
            space=link_type.space_id,
        ),
        created_at=link_type.created_at,
        updated_at=link_type.updated_at,
    )


def _non_empty(update: WorkItemLinkTypeUpdate, attr: str) -> str:
    value = getattr(update, attr)
    if not value:
        raise BadParameterError(attr, value)
    return value


def convert_link_type_to_model(
    update: WorkItemLinkTypeUpdate,
    current: WorkItemLinkType | None = None,
) -> WorkItemLinkType:
    """Merge ``update`` onto ``current`` and return the validated result.

    Without ``current`` the update is applied to an empty link type, so it
    has to carry every attribute needed for creation.
    """
    if current is None:
        current = WorkItemLinkType()
    values = current.column_values()
    present = update.model_fields_set

    if "id" in present and update.id is not None:
        # The id of an existing link type never changes.
        if values["id"] is not None and update.id != values["id"]:
            raise BadParameterError("id", update.id, expected=str(values["id"]))
        values["id"] = update.id
    for attr in ("name", "forward_name", "reverse_name"):
        if attr in present:
            values[attr] = _non_empty(update, attr)
    if "description" in present:
        values["description"] = update.description
    if "version" in present:
        if update.version is None:
            raise BadParameterError("version", None, expected="not <nil>")
        values["version"] = update.version
    if "topology" in present:
        check_valid_topology(update.topology)
        values["topology"] = update.topology

    rel = update.relationships
    if rel is not None:
        # An explicit null clears the reference, which validation then rejects.
        for attr, key in (
            ("link_category", "link_category_id"),
            ("source_type", "source_type_id"),
            ("target_type", "target_type_id"),
            ("space", "space_id"),
        ):
            if attr in rel.model_fields_set:
                values[key] = getattr(rel, attr)

    candidate = WorkItemLinkType(**values)
    candidate.check_valid_for_creation()
    return candidate


def convert_link_type_create(body: WorkItemLinkTypeCreate) -> WorkItemLinkType:
    values = body.model_dump(exclude_none=True)
    values["topology"] = body.topology.value
    link_type = WorkItemLinkType(**values)
    link_type.check_valid_for_creation()
    return link_type


# ---------------------------------------------------------------------------
# Work item types
# ---------------------------------------------------------------------------


def convert_type_from_model(wit: WorkItemType) -> WorkItemTypeResponse:
    return WorkItemTypeResponse.model_validate(wit)


def convert_type_create(
    body: WorkItemTypeCreate, parent: WorkItemType | None = None
) -> WorkItemType:
    """Build a new work item type below ``parent``.

    ``parent`` must be the loaded type referenced by ``body.extended_type_id``.
    """
    if body.extended_type_id is not None and (
        parent is None or parent.id != body.extended_type_id
    ):
        raise BadParameterError(
            "extended_type_id", body.extended_type_id, expected="id of the given parent"
        )
    values = body.model_dump(exclude_none=True, exclude={"extended_type_id", "fields"})
    wit = WorkItemType(**values, fields=dict(body.fields))
    if wit.id is None:
        # Column defaults only apply at flush; the path needs the id now.
        wit.id = uuid4()
    wit.inherit_from(parent)
    wit.check_valid_for_creation()
    return wit


def convert_type_to_model(
    update: WorkItemTypeUpdate, current: WorkItemType
) -> WorkItemType:
    """Merge ``update`` onto ``current`` and return the validated result.

    The path is never changed by an update.
    """
    present = update.model_fields_set
    overrides: dict[str, object] = {}
    if "name" in present:
        if not update.name:
            raise BadParameterError("name", update.name)
        overrides["name"] = update.name
    if "description" in present:
        overrides["description"] = update.description
    if "icon" in present:
        if not update.icon:
            raise BadParameterError("icon", update.icon)
        overrides["icon"] = update.icon
    if "version" in present:
        if update.version is None:
            raise BadParameterError("version", None, expected="not <nil>")
        overrides["version"] = update.version
    if "fields" in present:
        if update.fields is None:
            raise BadParameterError("fields", None, expected="not <nil>")
        overrides["fields"] = dict(update.fields)

    candidate = current.clone(**overrides)
    candidate.check_valid_for_creation()
    return candidate
