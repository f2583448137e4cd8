# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Test fixtures for savebackup tests.

Provides temporary directories, a sample save tree, and helpers for
comparing directory trees and hand-crafting archives.
"""

import os
import struct
import tempfile
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Dict, Generator, Iterable, Tuple

import pytest

# Fixed wall-clock time for archive names
FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0)

PLAYER_JSON = b'{"hp": 10}'


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def save_tree(temp_dir: Path) -> Path:
    """
    Create a small save folder:

        save/player.json      (10 bytes)
        save/maps/            (empty)
        save/world/region/r.0.0.map
        save/world/level.dat
    """
    save = temp_dir / "source" / "save"
    (save / "maps").mkdir(parents=True)
    (save / "world" / "region").mkdir(parents=True)
    (save / "player.json").write_bytes(PLAYER_JSON)
    (save / "world" / "region" / "r.0.0.map").write_bytes(bytes(range(256)) * 64)
    (save / "world" / "level.dat").write_bytes(b"level" * 1000)
    return save


@pytest.fixture
def example_save(temp_dir: Path) -> Path:
    """The two-entry save used throughout the docs."""
    save = temp_dir / "source" / "save"
    (save / "maps").mkdir(parents=True)
    (save / "player.json").write_bytes(PLAYER_JSON)
    return save


def snapshot_tree(root: Path) -> Dict[str, bytes | None]:
    """
    Map every path below root to its bytes (None for directories).
    """
    snapshot: Dict[str, bytes | None] = {}
    for path in sorted(root.rglob("*")):
        key = path.relative_to(root).as_posix()
        snapshot[key] = None if path.is_dir() else path.read_bytes()
    return snapshot


def write_raw_archive(
    archive_path: Path,
    entries: Iterable[Tuple[str, bytes]],
    comment: bytes = b"",
) -> Path:
    """Write a ZIP archive with exactly the given entry names."""
    with zipfile.ZipFile(archive_path, "w") as zf:
        for name, data in entries:
            zf.writestr(zipfile.ZipInfo(name), data)
        zf.comment = comment
    return archive_path


def write_undecodable_file(directory: Path, data: bytes = b"raw") -> None:
    """
    Create a file named with bytes that are not valid UTF-8 (b"\\xff.dat").

    Skips the test on filesystems that only accept UTF-8 names.
    """
    try:
        with open(os.path.join(os.fsencode(directory), b"\xff.dat"), "wb") as f:
            f.write(data)
    except OSError as e:
        pytest.skip(f"filesystem rejects non-UTF-8 names: {e}")


def overwrite_entry_data(archive_path: Path, name: str, fill: int = 0xFF) -> None:
    """Overwrite the stored bytes of one entry in place, leaving the headers intact."""
    with zipfile.ZipFile(archive_path) as zf:
        info = zf.getinfo(name)
    data = bytearray(archive_path.read_bytes())
    # Local file header: 30 fixed bytes, then the name and extra field
    name_len, extra_len = struct.unpack("<HH", data[info.header_offset + 26:info.header_offset + 30])
    start = info.header_offset + 30 + name_len + extra_len
    data[start:start + info.compress_size] = bytes([fill]) * info.compress_size
    archive_path.write_bytes(bytes(data))
