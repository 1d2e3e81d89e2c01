# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from worktypes.repositories.base import BaseRepository
from worktypes.repositories.link_category_repository import LinkCategoryRepository
from worktypes.repositories.link_type_repository import LinkTypeRepository
from worktypes.repositories.work_item_type_repository import WorkItemTypeRepository

__all__ = [
    "BaseRepository",
    "LinkCategoryRepository",
    "LinkTypeRepository",
    "WorkItemTypeRepository",
]
