# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

import enum
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from worktypes.errors import BadParameterError
from worktypes.identifiers import is_nil
from worktypes.models.base import Base, TimestampMixin, UUIDMixin
from worktypes.models.work_item_type import WorkItemType


class Topology(str, enum.Enum):
    """Graph shape a link type imposes on the work items it connects.

    The link type only records the topology. Whoever creates links of this
    type has to enforce it on the work item graph.
    """

    NETWORK = "network"
    DIRECTED_NETWORK = "directed_network"
    DEPENDENCY = "dependency"
    TREE = "tree"

    @property
    def is_directed(self) -> bool:
        return self is not Topology.NETWORK

    @property
    def allows_cycles(self) -> bool:
        return self in (Topology.NETWORK, Topology.DIRECTED_NETWORK)

    @property
    def single_parent(self) -> bool:
        """At most one incoming link of this type per work item."""
        return self is Topology.TREE


TOPOLOGY_VALUES = tuple(t.value for t in Topology)


def check_valid_topology(value: object) -> None:
    """Raise :class:`BadParameterError` unless ``value`` is a known topology."""
    if not isinstance(value, str) or value not in TOPOLOGY_VALUES:
        raise BadParameterError("topology", value, expected="|".join(TOPOLOGY_VALUES))


class WorkItemLinkType(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "work_item_link_types"

    # Unique, human readable name; links themselves are made by id.
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    topology: Mapped[str] = mapped_column(String, nullable=False)

    source_type_id: Mapped[UUID] = mapped_column(
        ForeignKey("work_item_types.id"),
        nullable=False,
    )
    target_type_id: Mapped[UUID] = mapped_column(
        ForeignKey("work_item_types.id"),
        nullable=False,
    )

    forward_name: Mapped[str] = mapped_column(String, nullable=False)
    reverse_name: Mapped[str] = mapped_column(String, nullable=False)

    link_category_id: Mapped[UUID] = mapped_column(
        ForeignKey("work_item_link_categories.id"),
        nullable=False,
    )
    # Owning space; spaces live outside this package.
    space_id: Mapped[UUID] = mapped_column(nullable=False)

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    __table_args__ = (
        CheckConstraint(
            "topology IN ('network', 'directed_network', 'dependency', 'tree')",
            name="ck_work_item_link_types_topology",
        ),
        Index("idx_work_item_link_types_category", "link_category_id"),
        Index(
            "idx_work_item_link_types_endpoints",
            "source_type_id",
            "target_type_id",
        ),
    )

    def check_valid_for_creation(self) -> None:
        """Raise :class:`BadParameterError` for the first invalid attribute.

        Checked in order: name, source_type_id, target_type_id, forward_name,
        reverse_name, topology, link_category_id, space_id.
        """
        if not self.name:
            raise BadParameterError("name", self.name)
        if is_nil(self.source_type_id):
            raise BadParameterError("source_type_id", self.source_type_id)
        if is_nil(self.target_type_id):
            raise BadParameterError("target_type_id", self.target_type_id)
        if not self.forward_name:
            raise BadParameterError("forward_name", self.forward_name)
        if not self.reverse_name:
            raise BadParameterError("reverse_name", self.reverse_name)
        check_valid_topology(self.topology)
        if is_nil(self.link_category_id):
            raise BadParameterError("link_category_id", self.link_category_id)
        if is_nil(self.space_id):
            raise BadParameterError("space_id", self.space_id)

    @property
    def topology_kind(self) -> Topology:
        return Topology(self.topology)

    def accepts(self, source: WorkItemType, target: WorkItemType) -> bool:
        """Return True if work items of these types may be linked this way.

        Subtypes of the declared source and target types are accepted too.
        """
        return source.is_type_or_subtype_of(
            self.source_type_id
        ) and target.is_type_or_subtype_of(self.target_type_id)

    def check_accepts(self, source: WorkItemType, target: WorkItemType) -> None:
        if not source.is_type_or_subtype_of(self.source_type_id):
            raise BadParameterError(
                "source_type_id", source.id, expected=f"type or subtype of {self.source_type_id}"
            )
        if not target.is_type_or_subtype_of(self.target_type_id):
            raise BadParameterError(
                "target_type_id", target.id, expected=f"type or subtype of {self.target_type_id}"
            )
