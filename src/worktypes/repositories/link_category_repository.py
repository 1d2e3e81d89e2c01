# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from worktypes.models.link_category import WorkItemLinkCategory
from worktypes.repositories.base import BaseRepository


class LinkCategoryRepository(BaseRepository[WorkItemLinkCategory]):
    entity_name = "work item link category"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, WorkItemLinkCategory)

    async def get_by_name(self, name: str) -> WorkItemLinkCategory | None:
        result = await self.session.execute(
            select(WorkItemLinkCategory).where(WorkItemLinkCategory.name == name)
        )
        return result.scalar_one_or_none()
