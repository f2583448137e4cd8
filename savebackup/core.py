# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Save Backup Core - the two public operations.

backup() and restore() resolve their configuration (explicit value,
otherwise the SAVEBACKUP_* environment) and run the engines. The
async variants run the same engines in the default executor so an
event loop is never blocked by disk or codec work.
"""

import asyncio
import functools
import os
from datetime import datetime

from savebackup.engine.manager import BackupResult, backup_save
from savebackup.engine.restore import RestoreResult, restore_backup
from savebackup.config import ArchiveConfig
from savebackup.env import create_config_from_env


def _resolve_config(config: ArchiveConfig | None) -> ArchiveConfig:
    return config if config is not None else create_config_from_env()


def backup(
    source_dir: str | os.PathLike,
    dest_dir: str | os.PathLike,
    config: ArchiveConfig | None = None,
    now: datetime | None = None,
) -> BackupResult:
    """
    Back up source_dir into dest_dir/<save name>/<save name>-[timestamp].<ext>.

    Raises SaveBackupError subclasses on failure.
    """
    return backup_save(source_dir, dest_dir, _resolve_config(config), now=now)


def restore(
    archive_path: str | os.PathLike,
    dest_dir: str | os.PathLike | None = None,
    config: ArchiveConfig | None = None,
) -> RestoreResult:
    """
    Restore an archive into dest_dir, or next to the archive when omitted.

    Raises SaveBackupError subclasses on failure.
    """
    return restore_backup(archive_path, dest_dir, _resolve_config(config))


async def backup_async(
    source_dir: str | os.PathLike,
    dest_dir: str | os.PathLike,
    config: ArchiveConfig | None = None,
    now: datetime | None = None,
) -> BackupResult:
    """Run backup() in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        functools.partial(backup, source_dir, dest_dir, config, now),
    )


async def restore_async(
    archive_path: str | os.PathLike,
    dest_dir: str | os.PathLike | None = None,
    config: ArchiveConfig | None = None,
) -> RestoreResult:
    """Run restore() in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        functools.partial(restore, archive_path, dest_dir, config),
    )
