# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from worktypes.models.link_type import Topology


class LinkTypeRelationships(BaseModel):
    """Entities a link type refers to, by id only."""

    link_category: UUID | None = None
    source_type: UUID | None = None
    target_type: UUID | None = None
    space: UUID | None = None


class WorkItemLinkTypeCreate(BaseModel):
    id: UUID | None = None
    name: str = Field(..., min_length=1)
    description: str | None = None
    topology: Topology
    forward_name: str = Field(..., min_length=1)
    reverse_name: str = Field(..., min_length=1)
    source_type_id: UUID
    target_type_id: UUID
    link_category_id: UUID
    space_id: UUID


class WorkItemLinkTypeUpdate(BaseModel):
    """Partial update of a link type.

    Every attribute is optional. Attributes that are not set keep their
    stored value; strings that are set must not be empty.
    """

    id: UUID | None = None
    name: str | None = None
    description: str | None = None
    version: int | None = None
    topology: str | None = None
    forward_name: str | None = None
    reverse_name: str | None = None
    relationships: LinkTypeRelationships | None = None


class WorkItemLinkTypeResponse(BaseModel):
    id: UUID
    name: str
    description: str | None
    version: int
    topology: Topology
    forward_name: str
    reverse_name: str
    relationships: LinkTypeRelationships
    created_at: datetime | None = None
    updated_at: datetime | None = None
