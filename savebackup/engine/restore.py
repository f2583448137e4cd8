# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Save Backup Restore - extract an archive back into a directory tree.

Entries are extracted one at a time in stored order. Parent
directories are created on demand, so entry order inside the archive
does not matter. Every stored path is validated against the
destination before anything is written.
"""

import os
import shutil
import zipfile
import zlib
from dataclasses import dataclass
from datetime import datetime, UTC
from pathlib import Path

import structlog

from savebackup.archive.compressor import COPY_BUFFER_SIZE, decompress_stream
from savebackup.archive.writer import decode_policy_comment
from savebackup.config import ArchiveConfig, CompressionPolicy
from savebackup.exceptions import (
    ArchiveIOError,
    CodecError,
    CorruptArchiveError,
    NotFoundError,
)
from savebackup.paths import resolve_target

logger = structlog.get_logger()

try:
    from compression.zstd import ZstdError as _ContainerZstdError
except ImportError:  # zipfile has no Zstandard support before Python 3.14
    CONTAINER_CODEC_ERRORS = (zlib.error,)
else:
    CONTAINER_CODEC_ERRORS = (zlib.error, _ContainerZstdError)


@dataclass
class RestoreResult:
    """Result of a restore run."""

    archive_path: Path
    destination: Path
    file_count: int
    directory_count: int
    bytes_written: int
    compression: CompressionPolicy
    duration_seconds: float = 0.0


def open_archive(archive_path: Path) -> zipfile.ZipFile:
    """Open an archive for reading, translating failures to our errors."""
    try:
        return zipfile.ZipFile(archive_path, "r")
    except (FileNotFoundError, IsADirectoryError) as e:
        raise NotFoundError(
            f"Backup archive not found: {archive_path}",
            details={"archive_path": str(archive_path)},
        ) from e
    except zipfile.BadZipFile as e:
        raise CorruptArchiveError(
            f"Not a valid backup archive: {e}",
            details={"archive_path": str(archive_path)},
        ) from e
    except OSError as e:
        raise ArchiveIOError(
            f"Failed to open backup archive: {e}",
            details={"archive_path": str(archive_path)},
        ) from e


def _extract_file(
    archive: zipfile.ZipFile,
    info: zipfile.ZipInfo,
    target: Path,
    policy: CompressionPolicy,
) -> int:
    target.parent.mkdir(parents=True, exist_ok=True)
    with archive.open(info) as source, open(target, "wb") as destination:
        if policy is CompressionPolicy.PRECOMPRESSED:
            return decompress_stream(source, destination)
        shutil.copyfileobj(source, destination, COPY_BUFFER_SIZE)
        return destination.tell()


def restore_backup(
    archive_path: str | os.PathLike,
    dest_dir: str | os.PathLike | None,
    config: ArchiveConfig,
) -> RestoreResult:
    """
    Restore a backup archive.

    Args:
        archive_path: Archive produced by backup_save
        dest_dir: Extraction root (default: the archive's directory)
        config: Supplies the payload policy when the archive records none

    Returns:
        RestoreResult with run statistics

    Raises:
        NotFoundError: archive is missing
        CorruptArchiveError: archive is not a readable container
        InvalidPathError: an entry would land outside the extraction root
        SaveBackupError: any other failure; files already written are kept
    """
    start_time = datetime.now(UTC)

    archive_path = Path(archive_path)
    destination = Path(dest_dir) if dest_dir is not None else archive_path.parent

    file_count = 0
    directory_count = 0
    bytes_written = 0

    with open_archive(archive_path) as archive:
        policy = decode_policy_comment(archive.comment) or config.compression

        logger.info(
            "restore_started",
            archive_path=str(archive_path),
            destination=str(destination),
            compression=policy.value,
            entries=len(archive.infolist()),
        )

        for info in archive.infolist():
            target = resolve_target(destination, info.filename)
            try:
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    directory_count += 1
                    logger.debug("restore_directory_created", stored_path=info.filename)
                    continue

                written = _extract_file(archive, info, target, policy)
            except zipfile.BadZipFile as e:
                raise CorruptArchiveError(
                    f"Corrupt archive entry {info.filename}: {e}",
                    details={"archive_path": str(archive_path), "entry": info.filename},
                ) from e
            except NotImplementedError as e:
                raise CodecError(
                    f"Unsupported compression for {info.filename}: {e}",
                    details={"archive_path": str(archive_path), "entry": info.filename},
                ) from e
            except CONTAINER_CODEC_ERRORS as e:
                raise CodecError(
                    f"Decompression failed for {info.filename}: {e}",
                    details={"archive_path": str(archive_path), "entry": info.filename},
                ) from e
            except OSError as e:
                raise ArchiveIOError(
                    f"Failed to extract {info.filename}: {e}",
                    details={"archive_path": str(archive_path), "target": str(target)},
                ) from e

            file_count += 1
            bytes_written += written
            logger.debug(
                "restore_entry_extracted",
                stored_path=info.filename,
                size=written,
            )

    duration = (datetime.now(UTC) - start_time).total_seconds()

    logger.info(
        "restore_completed",
        archive_path=str(archive_path),
        destination=str(destination),
        files=file_count,
        directories=directory_count,
        bytes_written=bytes_written,
        duration=duration,
    )

    return RestoreResult(
        archive_path=archive_path,
        destination=destination,
        file_count=file_count,
        directory_count=directory_count,
        bytes_written=bytes_written,
        compression=policy,
        duration_seconds=duration,
    )
