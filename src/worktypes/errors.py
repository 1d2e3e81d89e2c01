# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

from __future__ import annotations

from uuid import UUID

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class WorkTypesError(Exception):
    """Base exception for the work item type engine."""


class BadParameterError(WorkTypesError):
    """Raised when a parameter is missing, empty, or outside its valid set.

    Always caller-recoverable: the message names the offending parameter
    and, where known, the values that would have been accepted.
    """

    def __init__(
        self, parameter: str, value: object, expected: str | None = None
    ) -> None:
        self.parameter = parameter
        self.value = value
        self.expected = expected
        message = f"Bad value for parameter {parameter!r}: {value!r}"
        if expected is not None:
            message += f" (expected: {expected!r})"
        super().__init__(message)


class ConversionError(WorkTypesError):
    """Raised when a stored field value cannot be converted.

    ``field`` is the name of the field that failed, so callers can point the
    user at it.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.reason = message
        super().__init__(f"field {field!r}: {message}")


class NotFoundError(WorkTypesError):
    """Raised when an entity does not exist."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class VersionConflictError(WorkTypesError):
    """Raised when an update raced with a concurrent update.

    The presented ``expected_version`` no longer matches the stored one;
    the caller has to re-read before trying again.
    """

    def __init__(
        self, entity: str, identifier: UUID, expected_version: int | None
    ) -> None:
        self.entity = entity
        self.identifier = identifier
        self.expected_version = expected_version
        super().__init__(
            f"version conflict on {entity} {identifier}: "
            f"expected version {expected_version}"
        )
