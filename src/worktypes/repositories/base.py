# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

import logging
from typing import ClassVar, Generic, NoReturn, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

from worktypes.errors import NotFoundError, VersionConflictError
from worktypes.models.base import Base

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    entity_name: ClassVar[str] = "entity"

    # Columns an update never writes: identity, version counter, lifecycle.
    _immutable: ClassVar[frozenset[str]] = frozenset(
        {"id", "version", "created_at", "updated_at"}
    )

    def __init__(self, session: AsyncSession, model: type[T]) -> None:
        self.session = session
        self.model = model

    async def get_by_id(self, entity_id: UUID) -> T | None:
        return await self.session.get(self.model, entity_id)

    async def load(self, entity_id: UUID) -> T:
        """Like :meth:`get_by_id` but raise :class:`NotFoundError` on a miss."""
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity

    async def _validate(self, entity: T) -> None:
        """Raise if ``entity`` must not be written. Runs before every write."""
        entity.check_valid_for_creation()  # type: ignore[attr-defined]

    async def create(self, entity: T) -> T:
        await self._validate(entity)
        self.session.add(entity)
        await self.session.flush()
        logger.info(
            "Created %s %s",
            self.entity_name,
            entity.id,  # type: ignore[attr-defined]
            extra={"entity": self.entity_name, "entity_id": entity.id},  # type: ignore[attr-defined]
        )
        return entity

    async def update(self, candidate: T) -> T:
        """Persist ``candidate`` over the stored record with the same id.

        ``candidate`` is a transient copy such as the ones returned by the
        converters; the stored record is reloaded before the attributes are
        copied over. ``candidate.version`` must be the version the caller
        read. The write is a compare-and-swap on that version; a concurrent
        update raises :class:`VersionConflictError` and nothing is retried.
        """
        await self._validate(candidate)
        entity_id: UUID = candidate.id  # type: ignore[attr-defined]
        expected: int | None = candidate.version  # type: ignore[attr-defined]

        stored = await self.session.get(self.model, entity_id, populate_existing=True)
        if stored is None:
            raise NotFoundError(self.entity_name, entity_id)
        if stored.version != expected:  # type: ignore[attr-defined]
            self._conflict(entity_id, expected)

        for key, value in candidate.column_values().items():
            if key not in self._immutable:
                setattr(stored, key, value)
        # Every update bumps the version, even one without net changes.
        flag_modified(stored, "name")
        try:
            await self.session.flush()
        except StaleDataError:
            self._conflict(entity_id, expected)
        logger.info(
            "Updated %s %s to version %d",
            self.entity_name,
            entity_id,
            stored.version,  # type: ignore[attr-defined]
            extra={
                "entity": self.entity_name,
                "entity_id": entity_id,
                "version": stored.version,  # type: ignore[attr-defined]
            },
        )
        return stored

    def _conflict(self, entity_id: UUID, expected: int | None) -> NoReturn:
        logger.warning(
            "Version conflict on %s %s (expected version %s)",
            self.entity_name,
            entity_id,
            expected,
            extra={"entity": self.entity_name, "entity_id": entity_id, "version": expected},
        )
        raise VersionConflictError(self.entity_name, entity_id, expected)

    async def list_all(self, limit: int = 50, offset: int = 0) -> list[T]:
        result = await self.session.execute(
            select(self.model).limit(limit).offset(offset)
        )
        return list(result.scalars().all())

    async def delete(self, entity: T) -> None:
        await self.session.delete(entity)
        await self.session.flush()
