# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from typing import ClassVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from worktypes.identifiers import PATH_SEPARATOR, ltree_safe_id
from worktypes.models.work_item_type import WorkItemType
from worktypes.repositories.base import BaseRepository


class WorkItemTypeRepository(BaseRepository[WorkItemType]):
    entity_name = "work item type"
    # Moving a type in the hierarchy is not supported, so updates keep the path.
    _immutable: ClassVar[frozenset[str]] = BaseRepository._immutable | {"path"}

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, WorkItemType)

    async def create_below(
        self, wit: WorkItemType, parent_id: UUID | None = None
    ) -> WorkItemType:
        """Create ``wit`` as a subtype of ``parent_id`` (or as a root type)."""
        parent = await self.load(parent_id) if parent_id is not None else None
        wit.inherit_from(parent)
        return await self.create(wit)

    async def get_by_name(self, name: str) -> WorkItemType | None:
        result = await self.session.execute(
            select(WorkItemType).where(WorkItemType.name == name)
        )
        return result.scalars().first()

    async def list_subtypes(self, type_id: UUID) -> list[WorkItemType]:
        """Return all descendants of ``type_id``, not including itself."""
        needle = ltree_safe_id(type_id) + PATH_SEPARATOR
        result = await self.session.execute(
            select(WorkItemType).where(
                WorkItemType.path.contains(needle, autoescape=True)
            )
        )
        return [
            wit
            for wit in result.scalars().all()
            if wit.id != type_id and wit.is_type_or_subtype_of(type_id)
        ]
