# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Save Backup Manager - walk a save directory into one archive file.

Every walked entry becomes one archive entry stored under
"<save name>/<relative path>". Reading and compressing files runs on a
thread pool; only appending to the archive is serialized, through
ArchiveWriter's lock.
"""

import os
import stat
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from pathlib import Path
from typing import Callable, Iterable, Iterator, Set, Tuple

import structlog

from savebackup.archive.compressor import compress_file, get_compression_stats
from savebackup.archive.writer import (
    ZIP_EPOCH,
    ArchiveWriter,
    local_utc_offset,
    zip_date_time,
)
from savebackup.config import ArchiveConfig, CompressionPolicy
from savebackup.errors import explain_missing_save_directory
from savebackup.exceptions import ArchiveIOError, InvalidPathError, NotFoundError
from savebackup.paths import display_path, normalize_entry_path

logger = structlog.get_logger()

# Walk outcomes
ENTRY_FILE = "file"
ENTRY_DIRECTORY = "directory"
ENTRY_SKIPPED = "skipped"

EntryOutcome = Tuple[str, int]


@dataclass
class BackupResult:
    """Result of a backup run."""

    archive_path: Path
    save_name: str
    file_count: int
    directory_count: int
    skipped_count: int
    bytes_read: int
    archive_bytes: int
    compression: CompressionPolicy
    duration_seconds: float = 0.0


@dataclass
class _Tally:
    files: int = 0
    directories: int = 0
    skipped: int = 0
    bytes_read: int = 0

    def record(self, outcome: EntryOutcome) -> None:
        kind, size = outcome
        if kind == ENTRY_FILE:
            self.files += 1
            self.bytes_read += size
        elif kind == ENTRY_DIRECTORY:
            self.directories += 1
        else:
            self.skipped += 1


def archive_file_name(save_name: str, extension: str, when: datetime | None = None) -> str:
    """
    Build "<save>-[YYYY-MM-DD-HHMMSS].<ext>" from local wall-clock time.

    Names sort by creation time; two runs within one second collide.
    """
    when = when or datetime.now()
    return f"{save_name}-[{when:%Y-%m-%d-%H%M%S}].{extension}"


def walk_save_tree(save_path: Path, exclude: Path | None = None) -> Iterator[Path]:
    """
    Yield every file and directory below save_path.

    Directory symlinks are reported but not descended into. Directories
    the walk cannot list are skipped.
    """

    def _on_error(error: OSError) -> None:
        filename = display_path(error.filename) if error.filename else None
        logger.debug("walk_entry_skipped", path=filename, error=error.strerror)

    for dirpath, dirnames, filenames in os.walk(save_path, onerror=_on_error):
        dirnames.sort()
        base = Path(dirpath)
        for name in dirnames:
            yield base / name
        for name in sorted(filenames):
            path = base / name
            if exclude is not None and path == exclude:
                continue
            yield path


def _read_payload(path: Path, config: ArchiveConfig) -> Tuple[bytes, int]:
    if config.compression is CompressionPolicy.PRECOMPRESSED:
        return compress_file(path, config.zstd_level)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ArchiveIOError(
            f"Failed to read {display_path(path)}: {e}",
            details={"path": display_path(path)},
        ) from e
    return data, len(data)


def backup_entry(
    path: Path,
    save_base: Path,
    writer: ArchiveWriter,
    config: ArchiveConfig,
    utc_offset: timedelta | None,
) -> EntryOutcome:
    """
    Archive one walked entry.

    Safe to call from several threads at once: everything before the
    final append runs without shared state.
    """
    stored_path = normalize_entry_path(path, save_base)
    if not stored_path:
        raise InvalidPathError(
            f"Entry produces an empty archive path: {display_path(path)}",
            details={"path": display_path(path)},
        )

    try:
        info = path.stat()
    except FileNotFoundError:
        # Dangling symlink or entry removed during the walk
        logger.debug("walk_entry_skipped", path=display_path(path), reason="vanished")
        return ENTRY_SKIPPED, 0
    except OSError as e:
        raise ArchiveIOError(
            f"Failed to stat {display_path(path)}: {e}",
            details={"path": display_path(path)},
        ) from e

    date_time = ZIP_EPOCH
    if utc_offset is not None:
        date_time = zip_date_time(info.st_mtime, utc_offset)

    if stat.S_ISREG(info.st_mode):
        payload, original_size = _read_payload(path, config)
        writer.add_file(stored_path, payload, date_time)
        logger.debug(
            "backup_entry_written",
            stored_path=stored_path,
            original_size=original_size,
            stored_size=len(payload),
        )
        return ENTRY_FILE, original_size

    if stat.S_ISDIR(info.st_mode):
        writer.add_directory(stored_path, date_time)
        logger.debug("backup_directory_written", stored_path=stored_path)
        return ENTRY_DIRECTORY, 0

    logger.debug("walk_entry_skipped", path=display_path(path), reason="special_file")
    return ENTRY_SKIPPED, 0


def _run_sequential(
    entries: Iterable[Path],
    task: Callable[[Path], EntryOutcome],
    tally: _Tally,
) -> None:
    for path in entries:
        tally.record(task(path))


def _drain(done: Set[Future], tally: _Tally) -> None:
    for future in done:
        tally.record(future.result())


def _run_parallel(
    entries: Iterable[Path],
    task: Callable[[Path], EntryOutcome],
    tally: _Tally,
    max_workers: int | None,
) -> None:
    """
    Fan entries out over a thread pool.

    At most two tasks per worker are queued at a time, so an error stops
    scheduling further entries soon after it happens.
    """
    workers = max_workers or os.cpu_count() or 1
    window = workers * 2
    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="savebackup")
    pending: Set[Future] = set()
    try:
        for path in entries:
            if len(pending) >= window:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                _drain(done, tally)
            pending.add(pool.submit(task, path))

        while pending:
            done, pending = wait(pending, return_when=FIRST_COMPLETED)
            _drain(done, tally)
    except Exception:
        pool.shutdown(wait=True, cancel_futures=True)
        raise
    pool.shutdown(wait=True)


def backup_save(
    save_path: str | os.PathLike,
    dest_dir: str | os.PathLike,
    config: ArchiveConfig,
    now: datetime | None = None,
) -> BackupResult:
    """
    Back up a save directory into "<dest_dir>/<save name>/<archive>".

    Args:
        save_path: Directory to back up; its name becomes the archive root
        dest_dir: Directory receiving the per-save archive folder
        config: Archive configuration
        now: Local time used in the archive name (default: now)

    Returns:
        BackupResult with run statistics

    Raises:
        NotFoundError: save_path is missing or not a directory
        SaveBackupError: any entry failed; the partial archive is kept
    """
    start_time = datetime.now(UTC)

    save_path = Path(os.path.abspath(save_path))
    if not save_path.is_dir() or not save_path.name:
        raise NotFoundError(
            explain_missing_save_directory(display_path(save_path)),
            details={"save_path": display_path(save_path)},
        )

    save_name = save_path.name
    save_base = save_path.parent

    archive_dir = Path(dest_dir) / save_name
    try:
        archive_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArchiveIOError(
            f"Failed to create backup directory: {e}",
            details={"archive_dir": str(archive_dir)},
        ) from e

    archive_path = archive_dir / archive_file_name(save_name, config.archive_extension, now)
    utc_offset = local_utc_offset() if config.preserve_timestamps else None

    logger.info(
        "backup_started",
        save_path=display_path(save_path),
        archive_path=display_path(archive_path),
        compression=config.compression.value,
        parallel=config.parallel,
    )

    writer = ArchiveWriter(archive_path, config.compression)
    entries = walk_save_tree(save_path, exclude=Path(os.path.abspath(archive_path)))
    tally = _Tally()

    def task(path: Path) -> EntryOutcome:
        return backup_entry(path, save_base, writer, config, utc_offset)

    try:
        if config.parallel:
            _run_parallel(entries, task, tally, config.max_workers)
        else:
            _run_sequential(entries, task, tally)
        writer.finish()
    except Exception as e:
        writer.abort()
        logger.error(
            "backup_failed",
            save_path=display_path(save_path),
            archive_path=display_path(archive_path),
            error=str(e),
        )
        raise

    archive_bytes = archive_path.stat().st_size
    duration = (datetime.now(UTC) - start_time).total_seconds()

    result = BackupResult(
        archive_path=archive_path,
        save_name=save_name,
        file_count=tally.files,
        directory_count=tally.directories,
        skipped_count=tally.skipped,
        bytes_read=tally.bytes_read,
        archive_bytes=archive_bytes,
        compression=config.compression,
        duration_seconds=duration,
    )

    logger.info(
        "backup_completed",
        archive_path=display_path(archive_path),
        files=tally.files,
        directories=tally.directories,
        skipped=tally.skipped,
        duration=duration,
        **get_compression_stats(tally.bytes_read, archive_bytes),
    )

    return result
