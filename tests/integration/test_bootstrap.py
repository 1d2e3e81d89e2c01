# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from pathlib import Path
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from worktypes.bootstrap import planner_item_fields, populate_system_types, startup
from worktypes.config import get_settings
from worktypes.db.session import get_engine, get_session_factory
from worktypes.identifiers import (
    SYSTEM_BUG,
    SYSTEM_CREATED_AT,
    SYSTEM_CREATOR,
    SYSTEM_LINK_CATEGORY,
    SYSTEM_LINK_TYPE_BUG_BLOCKER,
    SYSTEM_LINK_TYPES,
    SYSTEM_PLANNER_ITEM,
    SYSTEM_STATE,
    SYSTEM_TITLE,
    SYSTEM_TYPES,
)
from worktypes.repositories.link_category_repository import LinkCategoryRepository
from worktypes.repositories.link_type_repository import LinkTypeRepository
from worktypes.repositories.work_item_type_repository import WorkItemTypeRepository


class TestPopulateSystemTypes:
    async def test_creates_taxonomy(self, db_session: AsyncSession) -> None:
        await populate_system_types(db_session)

        types = WorkItemTypeRepository(db_session)
        all_types = await types.list_all()
        assert {wit.id for wit in all_types} == set(SYSTEM_TYPES.values())

        planner = await types.load(SYSTEM_PLANNER_ITEM)
        bug = await types.load(SYSTEM_BUG)
        assert bug.path == f"{planner.path}.{bug.ltree_safe_id()}"
        assert bug.is_type_or_subtype_of(SYSTEM_PLANNER_ITEM)
        assert {SYSTEM_TITLE, SYSTEM_STATE, SYSTEM_CREATED_AT} <= set(bug.fields)
        subtypes = await types.list_subtypes(SYSTEM_PLANNER_ITEM)
        assert len(subtypes) == len(SYSTEM_TYPES) - 1

    async def test_creates_link_types(self, db_session: AsyncSession) -> None:
        await populate_system_types(db_session)

        category = await LinkCategoryRepository(db_session).load(SYSTEM_LINK_CATEGORY)
        assert category.name == "system"

        link_types = LinkTypeRepository(db_session)
        blocker = await link_types.load(SYSTEM_LINK_TYPES[SYSTEM_LINK_TYPE_BUG_BLOCKER])
        assert blocker.name == SYSTEM_LINK_TYPE_BUG_BLOCKER
        assert blocker.source_type_id == SYSTEM_BUG
        assert blocker.link_category_id == SYSTEM_LINK_CATEGORY
        assert len(await link_types.list_all()) == len(SYSTEM_LINK_TYPES)

    async def test_is_idempotent(self, db_session: AsyncSession) -> None:
        await populate_system_types(db_session)
        await populate_system_types(db_session)

        assert len(await WorkItemTypeRepository(db_session).list_all()) == len(SYSTEM_TYPES)
        assert len(await LinkTypeRepository(db_session).list_all()) == len(SYSTEM_LINK_TYPES)

    async def test_state_defaults_to_new(self, db_session: AsyncSession) -> None:
        await populate_system_types(db_session)
        bug = await WorkItemTypeRepository(db_session).load(SYSTEM_BUG)
        stored = bug.convert_fields_to_model(
            {SYSTEM_TITLE: "Crash", SYSTEM_CREATOR: uuid4()}
        )
        assert stored[SYSTEM_STATE] == "new"


def test_planner_item_fields_are_fresh() -> None:
    first = planner_item_fields()
    first.pop(SYSTEM_TITLE)
    assert SYSTEM_TITLE in planner_item_fields()


@pytest.fixture
async def file_database(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> AsyncIterator[None]:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'worktypes.db'}")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("LOG_FORMAT", "text")
    get_settings.cache_clear()
    get_engine.cache_clear()
    get_session_factory.cache_clear()
    yield
    await get_engine().dispose()
    get_session_factory.cache_clear()
    get_engine.cache_clear()
    get_settings.cache_clear()
    logger = logging.getLogger("worktypes")
    for handler in logger.handlers[:]:
        if handler.get_name() == "worktypes-setup":
            logger.removeHandler(handler)
            handler.close()


class TestStartup:
    async def test_startup_creates_schema_and_system_types(
        self, file_database: None
    ) -> None:
        await startup()
        # A second start finds everything in place.
        await startup()

        async with get_session_factory()() as session:
            types = await WorkItemTypeRepository(session).list_all()
        assert {wit.id for wit in types} == set(SYSTEM_TYPES.values())

    async def test_bootstrap_can_be_disabled(
        self, file_database: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BOOTSTRAP_SYSTEM_TYPES", "false")
        get_settings.cache_clear()
        await startup()

        async with get_session_factory()() as session:
            assert await WorkItemTypeRepository(session).list_all() == []
