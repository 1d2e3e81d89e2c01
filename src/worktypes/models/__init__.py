# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from worktypes.models.base import Base, TimestampMixin, UUIDMixin
from worktypes.models.link_category import WorkItemLinkCategory
from worktypes.models.link_type import (
    WorkItemLinkType,
    Topology,
    check_valid_topology,
)
from worktypes.models.work_item_type import WorkItemType

__all__ = [
    "Base",
    "TimestampMixin",
    "Topology",
    "UUIDMixin",
    "WorkItemLinkCategory",
    "WorkItemLinkType",
    "WorkItemType",
    "check_valid_topology",
]
