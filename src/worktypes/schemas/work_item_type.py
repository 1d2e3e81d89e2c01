# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from worktypes.fields import FieldDefinition
from worktypes.models.work_item_type import DEFAULT_ICON


class WorkItemTypeCreate(BaseModel):
    id: UUID | None = None
    name: str = Field(..., min_length=1)
    description: str | None = None
    icon: str = DEFAULT_ICON
    fields: dict[str, FieldDefinition] = {}
    # Parent type; its fields are inherited and its path is extended.
    extended_type_id: UUID | None = None


class WorkItemTypeUpdate(BaseModel):
    """Partial update: only attributes that are set are applied."""

    name: str | None = None
    description: str | None = None
    icon: str | None = None
    version: int | None = None
    fields: dict[str, FieldDefinition] | None = None


class WorkItemTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    icon: str
    version: int
    path: str
    fields: dict[str, FieldDefinition]
    created_at: datetime | None = None
    updated_at: datetime | None = None
