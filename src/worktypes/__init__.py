# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Worktypes Contributors

"""Work item type hierarchy, field schemas and link types."""

__version__ = "0.1.0"
