# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class WorkItemLinkCategoryCreate(BaseModel):
    id: UUID | None = None
    name: str = Field(..., min_length=1)
    description: str | None = None


class WorkItemLinkCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
