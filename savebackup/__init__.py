# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Save Backup - back up a game save folder into one archive and restore it.

Backups walk the save directory in parallel, pre-compress file payloads
with zstd and append them to a single ZIP container; restores extract
the container back into a directory tree. Package name: savebackup.
"""

__version__ = "0.1.0"

# Configuration
from savebackup.config import ArchiveConfig, CompressionPolicy

# Core functions
from savebackup.core import (
    backup,
    restore,
    backup_async,
    restore_async,
)

# Results
from savebackup.engine import BackupResult, RestoreResult

# Environment-based configuration and profiles
from savebackup.env import (
    create_config_from_env,
    production_defaults,
    portable_zip,
    uncompressed,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "ArchiveConfig",
    "CompressionPolicy",
    "create_config_from_env",
    "production_defaults",
    "portable_zip",
    "uncompressed",
    # Core operations
    "backup",
    "restore",
    "backup_async",
    "restore_async",
    # Results
    "BackupResult",
    "RestoreResult",
]
