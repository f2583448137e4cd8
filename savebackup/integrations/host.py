# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Host application boundary.

A host process embedding the engine only gets a success flag back.
Every SaveBackupError is logged here and collapsed to False; native
callers that need the error itself use savebackup.core directly.
"""

import structlog

from savebackup.core import backup
from savebackup.exceptions import SaveBackupError
from savebackup.paths import display_path

logger = structlog.get_logger()

HostPath = str | bytes


def _decode_host_path(value: HostPath) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def backup_save(save_path: HostPath, zip_dir_path: HostPath) -> bool:
    """
    Back up save_path into zip_dir_path.

    Args:
        save_path: Save directory, as text or UTF-8 bytes
        zip_dir_path: Directory receiving the archive folder

    Returns:
        True when the archive was fully written, False otherwise
    """
    try:
        save = _decode_host_path(save_path)
        zip_dir = _decode_host_path(zip_dir_path)
    except UnicodeDecodeError as e:
        logger.error("host_backup_rejected", reason="path_not_utf8", error=str(e))
        return False

    try:
        backup(save, zip_dir)
    except SaveBackupError as e:
        logger.error(
            "host_backup_failed",
            save_path=display_path(save),
            zip_dir_path=display_path(zip_dir),
            error_type=type(e).__name__,
            error=str(e),
        )
        return False
    return True
