# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Save Backup Configuration - Immutable configuration data structures.

All configuration is frozen (immutable) after creation so a single
value can be shared by every worker of a backup run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


# Permission bits stored on every archive entry (rwxr-xr-x)
ENTRY_UNIX_MODE = 0o755

# Zstandard accepts levels 1..22
MIN_ZSTD_LEVEL = 1
MAX_ZSTD_LEVEL = 22


class CompressionPolicy(str, Enum):
    """How file payloads are compressed inside the archive."""

    PRECOMPRESSED = "precompressed"  # zstd stream, stored uncompressed in the container
    CONTAINER = "container"  # container compresses raw bytes itself
    NONE = "none"  # raw bytes, no compression anywhere


def _validate_extension(extension: str) -> bool:
    """Archive extension must be a single plain file-name suffix."""
    if not extension:
        return False
    return not any(ch in extension for ch in (".", "/", "\\"))


@dataclass(frozen=True)
class ArchiveConfig:
    """
    Immutable configuration for backup and restore runs.

    The defaults describe the production build: parallel walk,
    timestamps preserved, payloads pre-compressed with zstd.
    """

    # Payload compression policy
    compression: CompressionPolicy = CompressionPolicy.PRECOMPRESSED

    # Record each entry's modification time
    preserve_timestamps: bool = True

    # Fan out over walk entries on a thread pool
    parallel: bool = True

    # Worker threads (None = os.cpu_count())
    max_workers: int | None = None

    # zstd level for pre-compressed payloads
    zstd_level: int = 1

    # Suffix of produced archive files
    archive_extension: str = "savebackup"

    def __post_init__(self) -> None:
        """Validate configuration after creation."""
        errors: List[str] = []

        if not isinstance(self.compression, CompressionPolicy):
            try:
                object.__setattr__(
                    self, "compression", CompressionPolicy(self.compression)
                )
            except ValueError:
                errors.append(f"Unknown compression policy: {self.compression!r}")

        if not MIN_ZSTD_LEVEL <= self.zstd_level <= MAX_ZSTD_LEVEL:
            errors.append(
                f"zstd_level must be between {MIN_ZSTD_LEVEL} and {MAX_ZSTD_LEVEL}, "
                f"got {self.zstd_level}"
            )

        if self.max_workers is not None and self.max_workers < 1:
            errors.append(f"max_workers must be >= 1, got {self.max_workers}")

        if not _validate_extension(self.archive_extension):
            from savebackup.errors import explain_invalid_extension

            errors.append(explain_invalid_extension(self.archive_extension))

        # Raise all errors at once
        if errors:
            from savebackup.exceptions import ConfigurationError

            raise ConfigurationError(
                "Configuration validation failed",
                details={"errors": errors},
            )

    def with_updates(self, **kwargs) -> "ArchiveConfig":
        """
        Create a new config with updated values.

        Since the config is frozen, this creates a new instance.
        """
        from dataclasses import asdict

        current = asdict(self)
        current.update(kwargs)
        return ArchiveConfig(**current)
