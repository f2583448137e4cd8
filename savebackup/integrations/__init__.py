# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Adapters that expose the engine to host applications.
"""

from savebackup.integrations.host import backup_save

__all__ = ["backup_save"]
