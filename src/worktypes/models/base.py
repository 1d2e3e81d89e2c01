# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from datetime import datetime
from typing import Any, Self, cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime, func
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    def column_values(self) -> dict[str, Any]:
        """Return every mapped column attribute of this instance by key."""
        mapper = sa_inspect(type(self))
        return {attr.key: getattr(self, attr.key) for attr in mapper.column_attrs}

    def equal(self, other: object) -> bool:
        """Structural equality over every mapped column.

        Instances of different classes are never equal. ORM identity
        (``==``/``is``) is left untouched so the session's identity map keeps
        working.
        """
        if type(other) is not type(self):
            return False
        mine = self.column_values()
        theirs = cast(Base, other).column_values()
        return all(self._column_equal(key, mine[key], theirs[key]) for key in mine)

    def _column_equal(self, key: str, left: Any, right: Any) -> bool:
        return bool(left == right)

    def clone(self, **overrides: Any) -> Self:
        """Return a transient copy with ``overrides`` applied.

        The copy is not attached to any session; the original is left
        untouched.
        """
        values = self.column_values()
        unknown = set(overrides) - set(values)
        if unknown:
            raise TypeError(f"unknown attributes: {sorted(unknown)}")
        values.update(overrides)
        return type(self)(**values)


class UUIDMixin:
    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        default=None,
    )
