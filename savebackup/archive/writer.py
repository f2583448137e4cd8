# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Archive Writer - single-writer arbiter over a ZIP container.

Worker threads prepare payloads independently and hand them to
ArchiveWriter, which holds one lock around "start entry + write bytes"
so entries never interleave in the output stream.
"""

import stat
import threading
import zipfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Tuple

import structlog

from savebackup.config import ENTRY_UNIX_MODE, CompressionPolicy
from savebackup.exceptions import ArchiveIOError, InvalidPathError, SaveBackupError

logger = structlog.get_logger()

# Archive comment prefix recording the payload policy
POLICY_COMMENT_PREFIX = b"savebackup:"

# DOS timestamps cover 1980..2107
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
ZIP_MAX_TIME = (2107, 12, 31, 23, 59, 58)

# Writes are buffered before reaching the archive file
WRITE_BUFFER_SIZE = 1024 * 1024

DateTimeTuple = Tuple[int, int, int, int, int, int]


def container_method(policy: CompressionPolicy) -> int:
    """
    Pick the ZIP compression method for a payload policy.

    Container compression uses Zstandard when this interpreter's zipfile
    supports it and Deflate otherwise.
    """
    if policy is CompressionPolicy.CONTAINER:
        return getattr(zipfile, "ZIP_ZSTANDARD", zipfile.ZIP_DEFLATED)
    return zipfile.ZIP_STORED


def local_utc_offset() -> timedelta:
    """Resolve the machine's current UTC offset."""
    return datetime.now().astimezone().utcoffset() or timedelta(0)


def zip_date_time(mtime: float, offset: timedelta) -> DateTimeTuple:
    """
    Convert a POSIX modification time into a ZIP local date-time.

    Times outside the DOS range are clamped to its bounds.
    """
    shifted = datetime.fromtimestamp(mtime, tz=timezone.utc) + offset
    value = (
        shifted.year,
        shifted.month,
        shifted.day,
        shifted.hour,
        shifted.minute,
        shifted.second,
    )
    return min(max(value, ZIP_EPOCH), ZIP_MAX_TIME)


def encode_policy_comment(policy: CompressionPolicy) -> bytes:
    return POLICY_COMMENT_PREFIX + policy.value.encode("ascii")


def decode_policy_comment(comment: bytes) -> CompressionPolicy | None:
    """Read the payload policy back from an archive comment, if recorded."""
    if not comment.startswith(POLICY_COMMENT_PREFIX):
        return None
    try:
        return CompressionPolicy(comment[len(POLICY_COMMENT_PREFIX):].decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        return None


class ArchiveWriter:
    """
    Thread-safe append-only writer for one archive file.

    The writer exclusively owns the output stream between open and
    finish; nothing may be added after finish.
    """

    def __init__(
        self,
        archive_path: Path,
        policy: CompressionPolicy,
    ) -> None:
        self.archive_path = archive_path
        self.policy = policy
        self._method = container_method(policy)
        self._lock = threading.Lock()
        self._names: set[str] = set()
        self._finished = False

        try:
            self._stream = open(archive_path, "wb", buffering=WRITE_BUFFER_SIZE)
        except OSError as e:
            raise ArchiveIOError(
                f"Failed to create archive: {e}",
                details={"archive_path": str(archive_path)},
            ) from e
        self._zip = zipfile.ZipFile(self._stream, "w", compression=self._method)
        self._zip.comment = encode_policy_comment(policy)

    def _entry_info(self, name: str, date_time: DateTimeTuple, is_dir: bool) -> zipfile.ZipInfo:
        info = zipfile.ZipInfo(name, date_time=date_time)
        info.create_system = 3  # unix
        if is_dir:
            info.external_attr = ((stat.S_IFDIR | ENTRY_UNIX_MODE) << 16) | 0x10
            info.compress_type = zipfile.ZIP_STORED
        else:
            info.external_attr = (stat.S_IFREG | ENTRY_UNIX_MODE) << 16
            info.compress_type = self._method
        return info

    def _claim(self, name: str) -> None:
        if self._finished:
            raise SaveBackupError(
                "Archive is already finished",
                details={"archive_path": str(self.archive_path), "entry": name},
            )
        if name in self._names:
            raise InvalidPathError(
                f"Duplicate archive entry: {name}",
                details={"archive_path": str(self.archive_path), "entry": name},
            )
        self._names.add(name)

    def add_file(self, stored_path: str, payload: bytes, date_time: DateTimeTuple = ZIP_EPOCH) -> None:
        """Append a file entry whose payload is already in final form."""
        info = self._entry_info(stored_path, date_time, is_dir=False)
        info.file_size = len(payload)
        with self._lock:
            self._claim(stored_path)
            try:
                with self._zip.open(info, "w") as entry:
                    entry.write(payload)
            except OSError as e:
                raise ArchiveIOError(
                    f"Failed to write archive entry: {e}",
                    details={"archive_path": str(self.archive_path), "entry": stored_path},
                ) from e

    def add_directory(self, stored_path: str, date_time: DateTimeTuple = ZIP_EPOCH) -> None:
        """Append a directory entry (stored with a trailing slash)."""
        name = stored_path.rstrip("/") + "/"
        info = self._entry_info(name, date_time, is_dir=True)
        with self._lock:
            self._claim(name)
            try:
                self._zip.writestr(info, b"")
            except OSError as e:
                raise ArchiveIOError(
                    f"Failed to write archive entry: {e}",
                    details={"archive_path": str(self.archive_path), "entry": name},
                ) from e

    def finish(self) -> None:
        """Write the central directory and close the archive file."""
        with self._lock:
            if self._finished:
                return
            self._finished = True
            try:
                self._zip.close()
                self._stream.close()
            except OSError as e:
                raise ArchiveIOError(
                    f"Failed to finalize archive: {e}",
                    details={"archive_path": str(self.archive_path)},
                ) from e

    def abort(self) -> None:
        """
        Close the output file without writing the central directory.

        The partially written archive is left on disk.
        """
        with self._lock:
            if self._finished:
                return
            self._finished = True
            # Detach so ZipFile never writes a central directory on collection
            self._zip.fp = None
            try:
                self._stream.close()
            except OSError as e:
                logger.warning(
                    "archive_abort_close_failed",
                    archive_path=str(self.archive_path),
                    error=str(e),
                )
