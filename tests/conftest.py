# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from worktypes.fields import FieldDefinition, Kind, SimpleType
from worktypes.identifiers import SYSTEM_TITLE, ltree_safe_id
from worktypes.models.base import Base


def _get_test_database_url() -> str:
    """Return the test database URL from env, falling back to in-memory SQLite."""
    return os.environ.get(
        "TEST_DATABASE_URL",
        "sqlite+aiosqlite:///:memory:",
    )


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Create an async engine for the test database."""
    url = _get_test_database_url()
    if url.startswith("sqlite"):
        # One shared connection, otherwise every connection gets its own
        # empty in-memory database.
        engine = create_async_engine(url, echo=False, poolclass=StaticPool)
    else:
        engine = create_async_engine(url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(
    async_engine: AsyncEngine,
) -> AsyncIterator[AsyncSession]:
    """Provide a transactional database session that rolls back after each test."""
    session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


# ---------------------------------------------------------------------------
# Factory helpers for creating model instances in tests
# ---------------------------------------------------------------------------

TIMESTAMP = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def make_work_item_type(
    *,
    id: UUID | None = None,
    name: str = "bug",
    description: str | None = "Something is broken",
    icon: str = "fa fa-bug",
    version: int = 1,
    parent_path: str | None = None,
    fields: dict[str, FieldDefinition] | None = None,
) -> dict[str, object]:
    """Return kwargs suitable for constructing a WorkItemType model instance."""
    type_id = id or uuid4()
    own = ltree_safe_id(type_id)
    return {
        "id": type_id,
        "name": name,
        "description": description,
        "icon": icon,
        "version": version,
        "path": f"{parent_path}.{own}" if parent_path else own,
        "fields": fields
        if fields is not None
        else {
            SYSTEM_TITLE: FieldDefinition(
                type=SimpleType(kind=Kind.STRING), required=True, label="Title"
            ),
        },
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
        "deleted_at": None,
    }


def make_link_category(
    *,
    name: str = "user",
    description: str | None = "Link types defined by users",
) -> dict[str, object]:
    """Return kwargs suitable for constructing a WorkItemLinkCategory."""
    return {
        "id": uuid4(),
        "name": name,
        "description": description,
    }


def make_link_type(
    *,
    source_type_id: UUID | None = None,
    target_type_id: UUID | None = None,
    link_category_id: UUID | None = None,
    space_id: UUID | None = None,
    name: str = "Blocker",
    topology: str = "dependency",
    forward_name: str = "blocks",
    reverse_name: str = "blocked by",
    description: str | None = None,
    version: int = 1,
) -> dict[str, object]:
    """Return kwargs suitable for constructing a WorkItemLinkType."""
    return {
        "id": uuid4(),
        "name": name,
        "description": description,
        "version": version,
        "topology": topology,
        "source_type_id": source_type_id or uuid4(),
        "target_type_id": target_type_id or uuid4(),
        "forward_name": forward_name,
        "reverse_name": reverse_name,
        "link_category_id": link_category_id or uuid4(),
        "space_id": space_id or uuid4(),
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
        "deleted_at": None,
    }
