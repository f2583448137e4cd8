# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Example: back up a save folder, then restore the newest backup.

Run with:
    python examples/backup_and_restore.py SAVE_DIR BACKUP_DIR [RESTORE_DIR]

Environment variables:
    SAVEBACKUP_COMPRESSION: precompressed | container | none
    SAVEBACKUP_PARALLEL: 1/0
    SAVEBACKUP_PRESERVE_TIMESTAMPS: 1/0
"""

import sys

from savebackup import backup, create_config_from_env, restore


def main() -> int:
    if len(sys.argv) < 3:
        print(__doc__)
        return 2

    save_dir, backup_dir = sys.argv[1], sys.argv[2]
    restore_dir = sys.argv[3] if len(sys.argv) > 3 else None

    config = create_config_from_env()

    result = backup(save_dir, backup_dir, config)
    print(
        f"Wrote {result.archive_path} "
        f"({result.file_count} files, {result.directory_count} directories, "
        f"{result.bytes_read} -> {result.archive_bytes} bytes)"
    )

    restored = restore(result.archive_path, restore_dir, config)
    print(f"Restored {restored.file_count} files into {restored.destination}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
