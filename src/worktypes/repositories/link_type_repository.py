# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from worktypes.errors import NotFoundError
from worktypes.models.link_category import WorkItemLinkCategory
from worktypes.models.link_type import WorkItemLinkType
from worktypes.models.work_item_type import WorkItemType
from worktypes.repositories.base import BaseRepository


class LinkTypeRepository(BaseRepository[WorkItemLinkType]):
    entity_name = "work item link type"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, WorkItemLinkType)

    async def _validate(self, link_type: WorkItemLinkType) -> None:
        await super()._validate(link_type)
        for model, entity_id, entity in (
            (WorkItemType, link_type.source_type_id, "work item type"),
            (WorkItemType, link_type.target_type_id, "work item type"),
            (WorkItemLinkCategory, link_type.link_category_id, "work item link category"),
        ):
            if await self.session.get(model, entity_id) is None:
                raise NotFoundError(entity, entity_id)

    async def get_by_name(self, name: str) -> WorkItemLinkType | None:
        result = await self.session.execute(
            select(WorkItemLinkType).where(WorkItemLinkType.name == name)
        )
        return result.scalar_one_or_none()

    async def find_by_category_and_types(
        self,
        link_category_id: UUID,
        source_type_id: UUID,
        target_type_id: UUID,
    ) -> list[WorkItemLinkType]:
        result = await self.session.execute(
            select(WorkItemLinkType).where(
                WorkItemLinkType.link_category_id == link_category_id,
                WorkItemLinkType.source_type_id == source_type_id,
                WorkItemLinkType.target_type_id == target_type_id,
            )
        )
        return list(result.scalars().all())

    async def list_applicable(
        self, source: WorkItemType, target: WorkItemType
    ) -> list[WorkItemLinkType]:
        """Return link types that may connect work items of these types.

        Link types declared on an ancestor of ``source`` or ``target`` apply
        to the subtype as well.
        """
        source_ids = [*source.ancestor_ids(), source.id]
        target_ids = [*target.ancestor_ids(), target.id]
        result = await self.session.execute(
            select(WorkItemLinkType).where(
                WorkItemLinkType.source_type_id.in_(source_ids),
                WorkItemLinkType.target_type_id.in_(target_ids),
            )
        )
        return [lt for lt in result.scalars().all() if lt.accepts(source, target)]
