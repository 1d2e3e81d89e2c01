# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from uuid import uuid4

import pytest
from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from tests.conftest import make_work_item_type
from worktypes.converters import convert_type_create, convert_type_to_model
from worktypes.errors import BadParameterError, NotFoundError, VersionConflictError
from worktypes.fields import EnumType, FieldDefinition, Kind, SimpleType, fields_equal
from worktypes.identifiers import SYSTEM_TITLE, ltree_safe_id
from worktypes.models.work_item_type import WorkItemType
from worktypes.repositories.work_item_type_repository import WorkItemTypeRepository
from worktypes.schemas.work_item_type import WorkItemTypeCreate, WorkItemTypeUpdate


def _new_type(name: str = "bug", **kwargs: object) -> WorkItemType:
    values = make_work_item_type(name=name, **kwargs)  # type: ignore[arg-type]
    # Let the database fill in version and timestamps.
    for key in ("version", "created_at", "updated_at"):
        values.pop(key)
    return WorkItemType(**values)  # type: ignore[arg-type]


class TestCreateAndGet:
    async def test_create_starts_at_version_one(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        created = await repo.create(_new_type())
        assert created.version == 1
        assert created.created_at is not None

        fetched = await repo.get_by_id(created.id)
        assert fetched is not None
        assert fetched.name == "bug"
        assert fetched.path == ltree_safe_id(created.id)

    async def test_fields_survive_a_round_trip(self, db_session: AsyncSession) -> None:
        fields = {
            SYSTEM_TITLE: FieldDefinition(type=SimpleType(kind=Kind.STRING), required=True),
            "system.state": FieldDefinition(
                type=EnumType(base_type=SimpleType(kind=Kind.STRING), values=("new", "done")),
                default="new",
            ),
        }
        repo = WorkItemTypeRepository(db_session)
        created = await repo.create(_new_type(fields=fields))
        db_session.expunge_all()

        fetched = await repo.load(created.id)
        assert fields_equal(fetched.fields, fields)

    async def test_get_missing_returns_none(self, db_session: AsyncSession) -> None:
        assert await WorkItemTypeRepository(db_session).get_by_id(uuid4()) is None

    async def test_load_missing_raises(self, db_session: AsyncSession) -> None:
        missing = uuid4()
        with pytest.raises(NotFoundError) as exc_info:
            await WorkItemTypeRepository(db_session).load(missing)
        assert exc_info.value.identifier == missing

    async def test_create_rejects_invalid(self, db_session: AsyncSession) -> None:
        with pytest.raises(BadParameterError):
            await WorkItemTypeRepository(db_session).create(_new_type(name=""))

    async def test_get_by_name(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        created = await repo.create(_new_type(name="feature"))
        assert await repo.get_by_name("feature") is created
        assert await repo.get_by_name("nothing") is None


class TestHierarchy:
    async def test_create_below_inherits(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        parent = await repo.create(_new_type(name="planneritem"))
        child = await repo.create_below(
            WorkItemType(
                id=uuid4(),
                name="task",
                fields={"effort": FieldDefinition(type=SimpleType(kind=Kind.FLOAT))},
            ),
            parent_id=parent.id,
        )
        assert child.path == f"{parent.path}.{ltree_safe_id(child.id)}"
        assert set(child.fields) == {SYSTEM_TITLE, "effort"}
        assert child.is_type_or_subtype_of(parent.id)

    async def test_create_below_missing_parent(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        with pytest.raises(NotFoundError):
            await repo.create_below(WorkItemType(id=uuid4(), name="orphan"), uuid4())

    async def test_list_subtypes(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        root = await repo.create(_new_type(name="planneritem"))
        child = await repo.create_below(WorkItemType(id=uuid4(), name="bug"), root.id)
        grandchild = await repo.create_below(
            WorkItemType(id=uuid4(), name="regression"), child.id
        )
        unrelated = await repo.create(_new_type(name="other"))

        subtypes = await repo.list_subtypes(root.id)
        assert {wit.id for wit in subtypes} == {child.id, grandchild.id}
        assert unrelated.id not in {wit.id for wit in await repo.list_subtypes(child.id)}
        assert await repo.list_subtypes(grandchild.id) == []


class TestUpdate:
    async def test_update_increments_version(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        created = await repo.create(_new_type(description="old"))
        candidate = convert_type_to_model(
            WorkItemTypeUpdate(description="new", version=1), created
        )

        updated = await repo.update(candidate)
        assert updated.version == 2
        assert updated.description == "new"
        assert updated.path == created.path

    async def test_update_without_changes_still_bumps_version(
        self, db_session: AsyncSession
    ) -> None:
        repo = WorkItemTypeRepository(db_session)
        created = await repo.create(_new_type())
        updated = await repo.update(created.clone())
        assert updated.version == 2

    async def test_update_never_moves_the_type(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        created = await repo.create(_new_type())
        original_path = created.path
        moved = created.clone(path=f"{ltree_safe_id(uuid4())}.{created.ltree_safe_id()}")
        updated = await repo.update(moved)
        assert updated.path == original_path

    async def test_stale_version_is_rejected(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        created = await repo.create(_new_type())
        stale = created.clone(name="first")
        await repo.update(created.clone(name="second"))

        with pytest.raises(VersionConflictError) as exc_info:
            await repo.update(stale)
        assert exc_info.value.expected_version == 1
        assert (await repo.load(created.id)).name == "second"

    async def test_concurrent_write_is_detected(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        created = await repo.create(_new_type())
        candidate = created.clone(name="mine")
        # Another writer gets there first.
        await db_session.execute(
            sa_update(WorkItemType)
            .where(WorkItemType.id == created.id)
            .values(version=WorkItemType.version + 1, name="theirs")
            .execution_options(synchronize_session=False)
        )

        with pytest.raises(VersionConflictError):
            await repo.update(candidate)

    async def test_stale_data_on_flush_is_a_conflict(
        self, db_session: AsyncSession, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        repo = WorkItemTypeRepository(db_session)
        created = await repo.create(_new_type())

        async def _lost_race() -> None:
            raise StaleDataError("UPDATE statement expected to update 1 row(s); 0 were matched.")

        monkeypatch.setattr(db_session, "flush", _lost_race)
        with pytest.raises(VersionConflictError):
            await repo.update(created.clone(name="late"))

    async def test_update_missing_raises(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        wit = WorkItemType(**make_work_item_type())  # type: ignore[arg-type]
        with pytest.raises(NotFoundError):
            await repo.update(wit)


class TestCreateFromSchema:
    async def test_create_from_request_body(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        parent = await repo.create(_new_type(name="planneritem"))
        wit = convert_type_create(
            WorkItemTypeCreate(name="epic", extended_type_id=parent.id), parent
        )
        created = await repo.create(wit)
        assert created.version == 1
        assert created.is_type_or_subtype_of(parent.id)


class TestListAndDelete:
    async def test_list_all_and_delete(self, db_session: AsyncSession) -> None:
        repo = WorkItemTypeRepository(db_session)
        first = await repo.create(_new_type(name="a"))
        await repo.create(_new_type(name="b"))
        assert len(await repo.list_all()) == 2
        assert len(await repo.list_all(limit=1)) == 1

        await repo.delete(first)
        assert await repo.get_by_id(first.id) is None
