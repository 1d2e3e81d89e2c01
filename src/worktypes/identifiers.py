# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

"""Well-known identifiers and the path-safe identifier encoding.

Everything in this module is a constant fixed at import time. The UUIDs are
persisted in every deployment and must never change.
"""

from __future__ import annotations

from types import MappingProxyType
from uuid import UUID

from worktypes.errors import BadParameterError

# Symbol used to concatenate sanitized type ids into a path.
PATH_SEPARATOR = "."

# ---------------------------------------------------------------------------
# System field names
# ---------------------------------------------------------------------------

SYSTEM_REMOTE_ITEM_ID = "system.remote_item_id"
SYSTEM_TITLE = "system.title"
SYSTEM_DESCRIPTION = "system.description"
SYSTEM_DESCRIPTION_MARKUP = "system.description.markup"
SYSTEM_DESCRIPTION_RENDERED = "system.description.rendered"
SYSTEM_STATE = "system.state"
SYSTEM_ASSIGNEES = "system.assignees"
SYSTEM_CREATOR = "system.creator"
SYSTEM_CREATED_AT = "system.created_at"
SYSTEM_ITERATION = "system.iteration"
SYSTEM_AREA = "system.area"
SYSTEM_CODEBASE = "system.codebase"

SYSTEM_STATE_OPEN = "open"
SYSTEM_STATE_NEW = "new"
SYSTEM_STATE_IN_PROGRESS = "in progress"
SYSTEM_STATE_RESOLVED = "resolved"
SYSTEM_STATE_CLOSED = "closed"

SYSTEM_STATES = (
    SYSTEM_STATE_NEW,
    SYSTEM_STATE_OPEN,
    SYSTEM_STATE_IN_PROGRESS,
    SYSTEM_STATE_RESOLVED,
    SYSTEM_STATE_CLOSED,
)

# ---------------------------------------------------------------------------
# System work item types
# ---------------------------------------------------------------------------

# Base type with the common fields of all planner item types.
SYSTEM_PLANNER_ITEM = UUID("86af5178-9b41-469b-9096-57e5155c3f31")
SYSTEM_USER_STORY = UUID("bbf35418-04b6-426c-a60b-7f80beb0b624")
SYSTEM_VALUE_PROPOSITION = UUID("3194ab60-855b-4155-9005-9dce4a05f1eb")
SYSTEM_FUNDAMENTAL = UUID("ee7ca005-f81d-4eea-9b9b-1965df0988d0")
SYSTEM_EXPERIENCE = UUID("b9a71831-c803-4f66-8774-4193fffd1311")
SYSTEM_FEATURE = UUID("0a24d3c2-e0a6-4686-8051-ec0ea1915a28")
SYSTEM_SCENARIO = UUID("71171e90-6d35-498f-a6a7-2083b5267c18")
SYSTEM_BUG = UUID("26787039-b68f-4e28-8814-c2f93be1ef4e")

SYSTEM_TYPES: MappingProxyType[str, UUID] = MappingProxyType(
    {
        "planneritem": SYSTEM_PLANNER_ITEM,
        "userstory": SYSTEM_USER_STORY,
        "valueproposition": SYSTEM_VALUE_PROPOSITION,
        "fundamental": SYSTEM_FUNDAMENTAL,
        "experience": SYSTEM_EXPERIENCE,
        "feature": SYSTEM_FEATURE,
        "scenario": SYSTEM_SCENARIO,
        "bug": SYSTEM_BUG,
    }
)

# ---------------------------------------------------------------------------
# System space, link category and link types
# ---------------------------------------------------------------------------

SYSTEM_SPACE = UUID("2e0698d8-753e-4cef-bb7c-f027634824a2")
SYSTEM_LINK_CATEGORY = UUID("b1482c65-a64d-4058-beb0-62f7198cb0f4")

SYSTEM_LINK_TYPE_BUG_BLOCKER = "Bug blocker"
SYSTEM_LINK_TYPE_PLANNER_ITEM_RELATED = "Related planner item"

SYSTEM_LINK_TYPES: MappingProxyType[str, UUID] = MappingProxyType(
    {
        SYSTEM_LINK_TYPE_BUG_BLOCKER: UUID("aad2a4ad-d601-4104-9804-2c977ca2e0c1"),
        SYSTEM_LINK_TYPE_PLANNER_ITEM_RELATED: UUID(
            "9b631885-83b1-4abb-a340-3a9ede8493fa"
        ),
    }
)

NIL_ID = UUID(int=0)


def is_nil(identifier: UUID | None) -> bool:
    """Return True for a missing identifier (``None`` or the nil UUID)."""
    return identifier is None or identifier == NIL_ID


def as_uuid(identifier: UUID | str) -> UUID:
    """Return ``identifier`` as a UUID, parsing its textual form if needed."""
    if isinstance(identifier, UUID):
        return identifier
    try:
        return UUID(str(identifier))
    except ValueError:
        raise BadParameterError("id", identifier, expected="UUID") from None


def ltree_safe_id(identifier: UUID | str) -> str:
    """Return ``identifier`` encoded as a path segment.

    The canonical hyphenated form of the UUID with every ``-`` replaced by
    ``_``, which is safe as a PostgreSQL ltree label and never contains
    :data:`PATH_SEPARATOR`.
    """
    return str(as_uuid(identifier)).replace("-", "_")
