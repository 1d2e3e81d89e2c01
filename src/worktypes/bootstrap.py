# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

"""Create the well-known system types, link category and link types.

All ids come from :mod:`worktypes.identifiers`, so running the bootstrap
against a populated database only creates what is missing.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from worktypes.config import Settings, get_settings
from worktypes.db.session import get_engine, get_session_factory
from worktypes.fields import EnumType, FieldDefinition, Kind, ListType, SimpleType
from worktypes.identifiers import (
    SYSTEM_AREA,
    SYSTEM_ASSIGNEES,
    SYSTEM_BUG,
    SYSTEM_CODEBASE,
    SYSTEM_CREATED_AT,
    SYSTEM_CREATOR,
    SYSTEM_DESCRIPTION,
    SYSTEM_ITERATION,
    SYSTEM_LINK_CATEGORY,
    SYSTEM_LINK_TYPE_BUG_BLOCKER,
    SYSTEM_LINK_TYPE_PLANNER_ITEM_RELATED,
    SYSTEM_LINK_TYPES,
    SYSTEM_PLANNER_ITEM,
    SYSTEM_REMOTE_ITEM_ID,
    SYSTEM_SPACE,
    SYSTEM_STATE,
    SYSTEM_STATE_NEW,
    SYSTEM_STATES,
    SYSTEM_TITLE,
    SYSTEM_TYPES,
)
from worktypes.logging import setup_logging
from worktypes.models.base import Base
from worktypes.models.link_category import WorkItemLinkCategory
from worktypes.models.link_type import Topology, WorkItemLinkType
from worktypes.models.work_item_type import WorkItemType
from worktypes.repositories.link_category_repository import LinkCategoryRepository
from worktypes.repositories.link_type_repository import LinkTypeRepository
from worktypes.repositories.work_item_type_repository import WorkItemTypeRepository

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

_STRING = SimpleType(kind=Kind.STRING)
_USER = SimpleType(kind=Kind.USER)


def planner_item_fields() -> dict[str, FieldDefinition]:
    """Fields shared by every planner item type."""
    return {
        SYSTEM_TITLE: FieldDefinition(type=_STRING, required=True, label="Title"),
        SYSTEM_DESCRIPTION: FieldDefinition(
            type=SimpleType(kind=Kind.MARKUP), label="Description"
        ),
        SYSTEM_STATE: FieldDefinition(
            type=EnumType(base_type=_STRING, values=SYSTEM_STATES),
            required=True,
            label="State",
            default=SYSTEM_STATE_NEW,
        ),
        SYSTEM_CREATOR: FieldDefinition(type=_USER, required=True, label="Creator"),
        SYSTEM_ASSIGNEES: FieldDefinition(
            type=ListType(component_type=_USER), label="Assignees"
        ),
        SYSTEM_CREATED_AT: FieldDefinition(
            type=SimpleType(kind=Kind.INSTANT), label="Created at"
        ),
        SYSTEM_REMOTE_ITEM_ID: FieldDefinition(type=_STRING, label="Remote item"),
        SYSTEM_ITERATION: FieldDefinition(
            type=SimpleType(kind=Kind.ITERATION), label="Iteration"
        ),
        SYSTEM_AREA: FieldDefinition(type=SimpleType(kind=Kind.AREA), label="Area"),
        SYSTEM_CODEBASE: FieldDefinition(
            type=SimpleType(kind=Kind.CODEBASE), label="Codebase"
        ),
    }


_ICONS = {
    "planneritem": "fa fa-paint-brush",
    "userstory": "fa fa-bookmark",
    "valueproposition": "fa fa-diamond",
    "fundamental": "fa fa-bank",
    "experience": "fa fa-map",
    "feature": "fa fa-mouse-pointer",
    "scenario": "fa fa-bolt",
    "bug": "fa fa-bug",
}


# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------


async def populate_system_types(session: AsyncSession) -> None:
    """Create missing system types, link category and link types.

    The caller owns the transaction and commits.
    """
    types = WorkItemTypeRepository(session)
    if await types.get_by_id(SYSTEM_PLANNER_ITEM) is None:
        await types.create_below(
            WorkItemType(
                id=SYSTEM_PLANNER_ITEM,
                name="planneritem",
                description="Base type of all planner items",
                icon=_ICONS["planneritem"],
                fields=planner_item_fields(),
            )
        )

    for name, type_id in SYSTEM_TYPES.items():
        if type_id == SYSTEM_PLANNER_ITEM or await types.get_by_id(type_id) is not None:
            continue
        await types.create_below(
            WorkItemType(id=type_id, name=name, icon=_ICONS[name], fields={}),
            parent_id=SYSTEM_PLANNER_ITEM,
        )

    categories = LinkCategoryRepository(session)
    if await categories.get_by_id(SYSTEM_LINK_CATEGORY) is None:
        await categories.create(
            WorkItemLinkCategory(
                id=SYSTEM_LINK_CATEGORY,
                name="system",
                description="Link types provided by the system",
            )
        )

    link_types = LinkTypeRepository(session)
    definitions = {
        SYSTEM_LINK_TYPE_BUG_BLOCKER: dict(
            topology=Topology.NETWORK.value,
            source_type_id=SYSTEM_BUG,
            target_type_id=SYSTEM_BUG,
            forward_name="blocks",
            reverse_name="blocked by",
        ),
        SYSTEM_LINK_TYPE_PLANNER_ITEM_RELATED: dict(
            topology=Topology.NETWORK.value,
            source_type_id=SYSTEM_PLANNER_ITEM,
            target_type_id=SYSTEM_PLANNER_ITEM,
            forward_name="relates to",
            reverse_name="is related to",
        ),
    }
    for name, attrs in definitions.items():
        link_type_id = SYSTEM_LINK_TYPES[name]
        if await link_types.get_by_id(link_type_id) is not None:
            continue
        await link_types.create(
            WorkItemLinkType(
                id=link_type_id,
                name=name,
                link_category_id=SYSTEM_LINK_CATEGORY,
                space_id=SYSTEM_SPACE,
                **attrs,
            )
        )
    logger.info("System work item types are in place")


async def startup(settings: Settings | None = None) -> None:
    """Process startup: configure logging and seed the system types.

    In development mode missing tables are created first; elsewhere the
    schema is expected to exist.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    if settings.environment == "development":
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    if settings.bootstrap_system_types:
        async with get_session_factory()() as session:
            await populate_system_types(session)
            await session.commit()
