# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Path normalization and extraction-target safety tests.
"""

import os
from pathlib import Path, PurePosixPath

import pytest

from savebackup.exceptions import InvalidPathError
from savebackup.paths import normalize_entry_path, resolve_target, split_stored_path


# ============================================================================
# Normalizing walked paths
# ============================================================================

def test_normalize_relative_to_base_keeps_save_name():
    stored = normalize_entry_path(
        PurePosixPath("/home/me/saves/world1/maps/a.map"),
        PurePosixPath("/home/me/saves"),
    )
    assert stored == "world1/maps/a.map"


def test_normalize_drops_root_and_dot_segments():
    assert normalize_entry_path("/a/./b/../c") == "a/b/c"
    assert normalize_entry_path("./a//b/") == "a/b"


def test_normalize_is_idempotent():
    once = normalize_entry_path("/x/./y/z.json")
    assert normalize_entry_path(once) == once


def test_normalize_base_itself_is_empty():
    assert normalize_entry_path("/saves/world1", "/saves/world1") == ""


def test_normalize_outside_base_is_rejected():
    with pytest.raises(InvalidPathError):
        normalize_entry_path("/elsewhere/file", "/saves")


# ============================================================================
# Validating stored paths
# ============================================================================

def test_split_plain_path():
    assert split_stored_path("save/maps/") == ("save", "maps")
    assert split_stored_path("save/./player.json") == ("save", "player.json")


@pytest.mark.parametrize(
    "stored_path",
    ["", "/", "../evil.txt", "save/../../evil.txt", "/etc/passwd", "C:/evil.txt", "\\\\server\\share\\x"],
)
def test_split_rejects_unsafe_paths(stored_path: str):
    with pytest.raises(InvalidPathError):
        split_stored_path(stored_path)


def test_resolve_target_stays_under_root(temp_dir: Path):
    target = resolve_target(temp_dir, "save/player.json")
    assert target == temp_dir.resolve() / "save" / "player.json"


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_resolve_target_rejects_symlink_escape(temp_dir: Path):
    dest = temp_dir / "dest"
    outside = temp_dir / "outside"
    dest.mkdir()
    outside.mkdir()
    os.symlink(outside, dest / "save")

    with pytest.raises(InvalidPathError):
        resolve_target(dest, "save/player.json")
