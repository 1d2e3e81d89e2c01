# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from worktypes.errors import BadParameterError, ConversionError
from worktypes.fields import FieldDefinition, FieldDefinitionsColumn, fields_equal
from worktypes.identifiers import (
    PATH_SEPARATOR,
    SYSTEM_CREATED_AT,
    as_uuid,
    ltree_safe_id,
)
from worktypes.models.base import Base, TimestampMixin, UUIDMixin

DEFAULT_ICON = "fa fa-question"


class WorkItemType(UUIDMixin, TimestampMixin, Base):
    """A work item type and its position in the type hierarchy.

    ``path`` holds the sanitized ids of all ancestors followed by the type's
    own sanitized id, joined by ``"."``, e.g. ``"<planneritem>.<bug>"``.
    Ancestry queries are answered from ``path`` alone, so the path has to be
    accurate: whoever moves a type to another parent must recompute the path
    of that type and of all of its descendants.
    """

    __tablename__ = "work_item_types"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    # CSS icon class used to render the type
    icon: Mapped[str] = mapped_column(String, nullable=False, default=DEFAULT_ICON)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    path: Mapped[str] = mapped_column(String, nullable=False)
    fields: Mapped[dict[str, FieldDefinition]] = mapped_column(
        FieldDefinitionsColumn,
        nullable=False,
        default=dict,
    )

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    __table_args__ = (
        Index("idx_work_item_types_name", "name"),
        Index("idx_work_item_types_path", "path"),
    )

    # ------------------------------------------------------------------
    # Hierarchy
    # ------------------------------------------------------------------

    def ltree_safe_id(self) -> str:
        return ltree_safe_id(self.id)

    def build_path(self, parent: WorkItemType | None = None) -> str:
        """Return the path of this type when placed below ``parent``."""
        if parent is None:
            return self.ltree_safe_id()
        return parent.path + PATH_SEPARATOR + self.ltree_safe_id()

    def inherit_from(self, parent: WorkItemType | None) -> None:
        """Place this (not yet persisted) type below ``parent``.

        Fields of the parent are inherited; definitions of this type take
        precedence over inherited ones with the same name.
        """
        self.path = self.build_path(parent)
        if parent is not None:
            self.fields = {**(parent.fields or {}), **(self.fields or {})}

    def ancestor_ids(self) -> list[UUID]:
        """Return the ids of all ancestors, root first, excluding this type."""
        segments = self.path.split(PATH_SEPARATOR)[:-1]
        return [UUID(segment.replace("_", "-")) for segment in segments]

    def is_type_or_subtype_of(self, type_id: UUID | str) -> bool:
        """Return True if this type is ``type_id`` or one of its subtypes.

        The check is done on ``path`` only: the sanitized id followed by the
        separator must appear in the path, starting at a segment boundary so
        that an id which happens to end another segment never matches.
        """
        type_id = as_uuid(type_id)
        if self.id == type_id:
            return True
        needle = ltree_safe_id(type_id) + PATH_SEPARATOR
        path = self.path or ""
        return path.startswith(needle) or (PATH_SEPARATOR + needle) in path

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def check_valid_for_creation(self) -> None:
        if not self.name:
            raise BadParameterError("name", self.name)
        own = self.ltree_safe_id()
        path = self.path or ""
        if path.split(PATH_SEPARATOR)[-1] != own:
            raise BadParameterError("path", self.path, expected=f"<ancestors>.{own}")
        for name in self.fields or {}:
            if not name:
                raise BadParameterError("fields", name, expected="non-empty field name")

    # ------------------------------------------------------------------
    # Equality and conversion
    # ------------------------------------------------------------------

    def _column_equal(self, key: str, left: Any, right: Any) -> bool:
        if key == "fields":
            return fields_equal(left or {}, right or {})
        return super()._column_equal(key, left, right)

    def convert_fields_from_model(self, stored: Mapping[str, Any]) -> dict[str, Any]:
        """Convert stored field values of a work item of this type.

        ``system.created_at`` is never part of the result. The first field
        that fails to convert aborts the conversion.
        """
        result: dict[str, Any] = {}
        for name, definition in (self.fields or {}).items():
            if name == SYSTEM_CREATED_AT:
                continue
            try:
                result[name] = definition.convert_from_model(name, stored.get(name))
            except ConversionError as exc:
                raise ConversionError(
                    name,
                    f"work item type {self.name!r}: {exc.reason}",
                ) from exc
        return result

    def convert_fields_to_model(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Validate incoming field values and return their stored form."""
        schema = self.fields or {}
        unknown = sorted(set(values) - set(schema))
        if unknown:
            raise BadParameterError(
                "fields", unknown[0], expected=f"a field of work item type {self.name!r}"
            )
        result: dict[str, Any] = {}
        for name, definition in schema.items():
            if name == SYSTEM_CREATED_AT and name not in values:
                continue
            result[name] = definition.convert_to_model(name, values.get(name))
        return result
