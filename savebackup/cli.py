# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Command-line restore tool.

    savebackup-restore ARCHIVE [OUTPUT_DIR]

Without OUTPUT_DIR the archive is extracted next to itself. The tool is
usually started by dropping an archive on it, so it waits for Enter
before closing whenever there is something to read.
"""

import argparse
import sys
from typing import List, Optional

from savebackup.core import restore
from savebackup.exceptions import SaveBackupError


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="savebackup-restore",
        description="Restore a save backup archive into a directory.",
    )
    ap.add_argument("archive", nargs="?", help="Path of the backup archive")
    ap.add_argument(
        "output_dir",
        nargs="?",
        help="Directory to extract into (default: the archive's directory)",
    )
    return ap


def _wait_for_enter() -> None:
    print("Press Enter to exit")
    try:
        input()
    except EOFError:
        # stdin closed or detached, nothing to wait for
        pass


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not args.archive:
        print("Please pass the path of a save backup archive!")
        _wait_for_enter()
        return 0

    print(f"Reading save backup archive: {args.archive}")
    try:
        restore(args.archive, args.output_dir)
    except SaveBackupError as e:
        print(f"Failed to read save backup archive: {e}")
        _wait_for_enter()
        return 1

    print("Save backup archive restored successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
