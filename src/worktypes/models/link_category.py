# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from worktypes.errors import BadParameterError
from worktypes.models.base import Base, TimestampMixin, UUIDMixin


class WorkItemLinkCategory(UUIDMixin, TimestampMixin, Base):
    """Groups related work item link types (e.g. "system", "user")."""

    __tablename__ = "work_item_link_categories"

    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    def check_valid_for_creation(self) -> None:
        if not self.name:
            raise BadParameterError("name", self.name)
