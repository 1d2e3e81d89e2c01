# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

"""Logging setup for worktypes.

Library modules only obtain loggers with ``logging.getLogger(__name__)``;
applications call :func:`setup_logging` once to attach a handler.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from typing import Any, TextIO

_LOGGER_NAME = "worktypes"
_setup_lock = threading.Lock()


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "entity"):
            entry["entity"] = record.entity
        if hasattr(record, "entity_id"):
            entry["entity_id"] = record.entity_id
        if hasattr(record, "version"):
            entry["version"] = record.version
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    level: str = "info", fmt: str = "json", stream: TextIO | None = None
) -> logging.Logger:
    """Attach a stream handler to the ``worktypes`` logger.

    Calling it again replaces the handler installed by a previous call
    instead of adding a second one.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        _JsonFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT)
    )
    handler.set_name("worktypes-setup")

    with _setup_lock:
        for existing in logger.handlers[:]:
            if existing.get_name() == "worktypes-setup":
                logger.removeHandler(existing)
                existing.close()
        logger.addHandler(handler)
        logger.setLevel(level.upper())
    return logger
