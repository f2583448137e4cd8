# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Host boundary and command-line adapter tests.
"""

from pathlib import Path

import pytest

from conftest import PLAYER_JSON, overwrite_entry_data, write_undecodable_file
from savebackup import ArchiveConfig, CompressionPolicy, backup
from savebackup.cli import main
from savebackup.integrations.host import backup_save


# ============================================================================
# Host boundary
# ============================================================================

def test_host_backup_returns_true_on_success(example_save: Path, temp_dir: Path):
    out = temp_dir / "out"

    assert backup_save(str(example_save), str(out)) is True
    assert len(list((out / "save").iterdir())) == 1


def test_host_backup_accepts_utf8_bytes(example_save: Path, temp_dir: Path):
    assert backup_save(str(example_save).encode(), str(temp_dir / "out").encode()) is True


def test_host_backup_collapses_errors_to_false(temp_dir: Path):
    assert backup_save(str(temp_dir / "missing"), str(temp_dir / "out")) is False


def test_host_backup_rejects_non_utf8_paths(temp_dir: Path):
    assert backup_save(b"\xff\xfe", str(temp_dir / "out")) is False


def test_host_backup_handles_non_utf8_file_names(example_save: Path, temp_dir: Path):
    write_undecodable_file(example_save)

    assert backup_save(str(example_save), str(temp_dir / "out")) is True


# ============================================================================
# Command line
# ============================================================================

@pytest.fixture
def no_wait(monkeypatch):
    """Record prompts instead of blocking on Enter."""
    prompts = []
    monkeypatch.setattr("builtins.input", lambda *args: prompts.append(args) or "")
    return prompts


def test_cli_without_arguments_prompts_and_exits_zero(no_wait, capsys):
    assert main([]) == 0
    assert len(no_wait) == 1
    assert "backup archive" in capsys.readouterr().out


def test_cli_restores_into_output_dir(example_save: Path, temp_dir: Path, no_wait):
    archive = backup(example_save, temp_dir / "out", ArchiveConfig()).archive_path

    assert main([str(archive), str(temp_dir / "restored")]) == 0
    assert (temp_dir / "restored" / "save" / "player.json").read_bytes() == PLAYER_JSON
    assert no_wait == []


def test_cli_failure_waits_and_exits_one(temp_dir: Path, no_wait, capsys):
    assert main([str(temp_dir / "missing.savebackup")]) == 1
    assert len(no_wait) == 1
    assert "Failed" in capsys.readouterr().out


def test_cli_corrupt_payload_exits_one(save_tree: Path, temp_dir: Path, no_wait, capsys):
    config = ArchiveConfig(compression=CompressionPolicy.CONTAINER)
    archive = backup(save_tree, temp_dir / "out", config).archive_path
    overwrite_entry_data(archive, "save/world/level.dat")

    assert main([str(archive), str(temp_dir / "restored")]) == 1
    assert len(no_wait) == 1
    assert "Failed" in capsys.readouterr().out
