# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Engine - save directory backup and restore operations.
"""

from savebackup.engine.manager import (
    backup_save,
    archive_file_name,
    walk_save_tree,
    BackupResult,
)

from savebackup.engine.restore import (
    restore_backup,
    open_archive,
    RestoreResult,
)

__all__ = [
    # Manager
    "backup_save",
    "archive_file_name",
    "walk_save_tree",
    "BackupResult",
    # Restore
    "restore_backup",
    "open_archive",
    "RestoreResult",
]
