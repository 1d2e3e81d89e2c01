# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

"""Field schema of work item types.

A field schema maps field names to :class:`FieldDefinition` objects. Each
definition carries a field type descriptor that knows how to convert a
value between its stored (JSON) form and the form exposed to callers.

Stored forms::

    string, url, markup, workitem   str
    integer                         int
    float                           int | float
    boolean                         bool
    instant                         ISO-8601 str (UTC)
    duration                        number of seconds
    user, iteration, area,
    codebase, label                 UUID as str
    enum                            stored form of its base type
    list                            list of stored forms of its component
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Tag,
    TypeAdapter,
)
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import TypeDecorator

from worktypes.errors import BadParameterError, ConversionError


class Kind(str, enum.Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    INSTANT = "instant"
    DURATION = "duration"
    URL = "url"
    MARKUP = "markup"
    WORKITEM = "workitem"
    USER = "user"
    ITERATION = "iteration"
    AREA = "area"
    CODEBASE = "codebase"
    LABEL = "label"
    ENUM = "enum"
    LIST = "list"


_TEXT_KINDS = {Kind.STRING, Kind.URL, Kind.MARKUP, Kind.WORKITEM}
_REFERENCE_KINDS = {Kind.USER, Kind.ITERATION, Kind.AREA, Kind.CODEBASE, Kind.LABEL}


def _describe(value: object) -> str:
    return f"{value!r} ({type(value).__name__})"


# ---------------------------------------------------------------------------
# Field type descriptors
# ---------------------------------------------------------------------------


class SimpleType(BaseModel):
    """A scalar or reference field type."""

    model_config = ConfigDict(frozen=True)

    kind: Kind

    def convert_from_model(self, name: str, value: Any) -> Any:
        if value is None:
            return None
        kind = self.kind
        if kind in _TEXT_KINDS:
            if not isinstance(value, str):
                raise ConversionError(name, f"expected a {kind.value} string, got {_describe(value)}")
            return value
        if kind is Kind.INTEGER:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConversionError(name, f"expected an integer, got {_describe(value)}")
            if isinstance(value, float) and not value.is_integer():
                raise ConversionError(name, f"expected an integer, got {_describe(value)}")
            return int(value)
        if kind is Kind.FLOAT:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConversionError(name, f"expected a float, got {_describe(value)}")
            return float(value)
        if kind is Kind.BOOLEAN:
            if not isinstance(value, bool):
                raise ConversionError(name, f"expected a boolean, got {_describe(value)}")
            return value
        if kind is Kind.INSTANT:
            return _instant_from_model(name, value)
        if kind is Kind.DURATION:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConversionError(name, f"expected a duration in seconds, got {_describe(value)}")
            try:
                return timedelta(seconds=value)
            except (OverflowError, ValueError):
                raise ConversionError(
                    name, f"duration out of range: {_describe(value)}"
                ) from None
        if kind in _REFERENCE_KINDS:
            try:
                return UUID(str(value))
            except ValueError:
                raise ConversionError(
                    name, f"expected a {kind.value} id, got {_describe(value)}"
                ) from None
        raise ConversionError(name, f"unsupported simple kind {kind.value!r}")

    def convert_to_model(self, name: str, value: Any) -> Any:
        if value is None:
            return None
        kind = self.kind
        if kind is Kind.INSTANT:
            if isinstance(value, datetime):
                if value.tzinfo is None:
                    value = value.replace(tzinfo=timezone.utc)
                return value.astimezone(timezone.utc).isoformat()
            return _instant_from_model(name, value).isoformat()
        if kind is Kind.DURATION:
            if not isinstance(value, timedelta):
                value = self.convert_from_model(name, value)
            return value.total_seconds()
        if kind in _REFERENCE_KINDS:
            return str(self.convert_from_model(name, value))
        return self.convert_from_model(name, value)


def _instant_from_model(name: str, value: Any) -> datetime:
    if isinstance(value, bool):
        raise ConversionError(name, f"expected an instant, got {_describe(value)}")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, ValueError, OSError):
            raise ConversionError(name, f"instant out of range: {_describe(value)}") from None
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise ConversionError(
                name, f"expected an ISO-8601 instant, got {value!r}"
            ) from None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    raise ConversionError(name, f"expected an instant, got {_describe(value)}")


class EnumType(BaseModel):
    """A field restricted to an ordered set of values of a simple base type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    base_type: SimpleType
    values: tuple[Any, ...]

    def convert_from_model(self, name: str, value: Any) -> Any:
        converted = self.base_type.convert_from_model(name, value)
        if converted is None:
            return None
        if converted not in self._allowed(name):
            raise ConversionError(
                name, f"value {value!r} is not one of {list(self.values)!r}"
            )
        return converted

    def convert_to_model(self, name: str, value: Any) -> Any:
        stored = self.base_type.convert_to_model(name, value)
        if stored is None:
            return None
        if self.base_type.convert_from_model(name, stored) not in self._allowed(name):
            raise ConversionError(
                name, f"value {value!r} is not one of {list(self.values)!r}"
            )
        return stored

    def _allowed(self, name: str) -> list[Any]:
        return [self.base_type.convert_from_model(name, v) for v in self.values]


class ListType(BaseModel):
    """A field holding a list of values of a simple component type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    component_type: SimpleType

    def convert_from_model(self, name: str, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            raise ConversionError(name, f"expected a list, got {_describe(value)}")
        return [self.component_type.convert_from_model(name, v) for v in value]

    def convert_to_model(self, name: str, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            raise ConversionError(name, f"expected a list, got {_describe(value)}")
        return [self.component_type.convert_to_model(name, v) for v in value]


def _field_type_tag(value: Any) -> str:
    if isinstance(value, EnumType):
        return "enum"
    if isinstance(value, ListType):
        return "list"
    if isinstance(value, SimpleType):
        return "simple"
    kind = value.get("kind") if isinstance(value, dict) else None
    if kind in (Kind.ENUM, Kind.ENUM.value):
        return "enum"
    if kind in (Kind.LIST, Kind.LIST.value):
        return "list"
    return "simple"


FieldType = Annotated[
    Annotated[SimpleType, Tag("simple")]
    | Annotated[EnumType, Tag("enum")]
    | Annotated[ListType, Tag("list")],
    Discriminator(_field_type_tag),
]


# ---------------------------------------------------------------------------
# Field definitions
# ---------------------------------------------------------------------------


class FieldDefinition(BaseModel):
    """Describes one field of a work item type."""

    model_config = ConfigDict(frozen=True)

    type: FieldType
    required: bool = False
    label: str = ""
    description: str = ""
    default: Any = None

    def convert_from_model(self, name: str, value: Any) -> Any:
        """Convert a stored value into the value exposed to callers."""
        return self.type.convert_from_model(name, value)

    def convert_to_model(self, name: str, value: Any) -> Any:
        """Validate an incoming value and return its stored form."""
        if value is None:
            value = self.default
        if value is None:
            if self.required:
                raise BadParameterError(name, value, expected="not <nil>")
            return None
        return self.type.convert_to_model(name, value)


FieldDefinitions = dict[str, FieldDefinition]

field_definitions_adapter: TypeAdapter[FieldDefinitions] = TypeAdapter(FieldDefinitions)


def fields_equal(
    left: Mapping[str, FieldDefinition], right: Mapping[str, FieldDefinition]
) -> bool:
    """Return True if both schemas have the same keys and equal definitions."""
    if len(left) != len(right):
        return False
    for name, definition in left.items():
        other = right.get(name)
        if other is None or definition != other:
            return False
    return True


class FieldDefinitionsColumn(TypeDecorator[FieldDefinitions]):
    """Stores a field schema as JSON (JSONB on PostgreSQL)."""

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: Any) -> Any:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(
        self, value: Mapping[str, FieldDefinition] | None, dialect: Any
    ) -> dict[str, Any] | None:
        if value is None:
            return None
        return field_definitions_adapter.dump_python(dict(value), mode="json")

    def process_result_value(
        self, value: dict[str, Any] | None, dialect: Any
    ) -> FieldDefinitions | None:
        if value is None:
            return None
        return field_definitions_adapter.validate_python(value)
