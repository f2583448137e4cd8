# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Save Backup Exceptions - Custom exceptions for the savebackup package.
"""


class SaveBackupError(Exception):
    """Base exception for all savebackup errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(SaveBackupError):
    """Raised when configuration is invalid."""

    pass


class NotFoundError(SaveBackupError):
    """Raised when the save directory or archive file does not exist."""

    pass


class InvalidPathError(SaveBackupError):
    """Raised when an entry path is empty or would escape its root."""

    pass


class ArchiveIOError(SaveBackupError):
    """Raised when reading, writing or creating files fails."""

    pass


class CodecError(SaveBackupError):
    """Raised when Zstandard compression or decompression fails."""

    pass


class CorruptArchiveError(SaveBackupError):
    """Raised when the archive container is structurally invalid."""

    pass
