# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Environment-based configuration helpers and archive profiles.

These helpers are small, convenient wrappers around ArchiveConfig and
ArchiveConfig.with_updates(). They make it easy to:

- Build a configuration from environment variables
- Pick one of the ready-made archive profiles
"""

from __future__ import annotations

import os
from typing import Any, Mapping

from savebackup.config import ArchiveConfig, CompressionPolicy
from savebackup.errors import (
    explain_invalid_bool_env,
    explain_invalid_compression_env,
    explain_invalid_int_env,
)
from savebackup.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_compression(value: str | None) -> CompressionPolicy:
    if not value:
        return CompressionPolicy.PRECOMPRESSED
    try:
        return CompressionPolicy(value.strip().lower())
    except ValueError as exc:
        raise ConfigurationError(explain_invalid_compression_env(value)) from exc


def _parse_bool(name: str, value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(explain_invalid_bool_env(name, value))


def _parse_positive_int(name: str, value: str | None) -> int | None:
    if not value:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(explain_invalid_int_env(name, value)) from exc
    if number < 1:
        raise ConfigurationError(explain_invalid_int_env(name, value))
    return number


def create_config_from_env(
    env: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ArchiveConfig:
    """
    Create an ArchiveConfig from environment variables.

    Environment variables:
    - SAVEBACKUP_COMPRESSION: precompressed | container | none
    - SAVEBACKUP_PRESERVE_TIMESTAMPS: boolean switch (default on)
    - SAVEBACKUP_PARALLEL: boolean switch (default on)
    - SAVEBACKUP_MAX_WORKERS: positive integer
    - SAVEBACKUP_ZSTD_LEVEL: 1..22
    - SAVEBACKUP_ARCHIVE_EXTENSION: archive file suffix

    Keyword overrides take precedence over the environment.
    """

    source = os.environ if env is None else env

    values: dict[str, Any] = {
        "compression": _parse_compression(source.get("SAVEBACKUP_COMPRESSION")),
        "preserve_timestamps": _parse_bool(
            "SAVEBACKUP_PRESERVE_TIMESTAMPS",
            source.get("SAVEBACKUP_PRESERVE_TIMESTAMPS"),
            True,
        ),
        "parallel": _parse_bool(
            "SAVEBACKUP_PARALLEL", source.get("SAVEBACKUP_PARALLEL"), True
        ),
        "max_workers": _parse_positive_int(
            "SAVEBACKUP_MAX_WORKERS", source.get("SAVEBACKUP_MAX_WORKERS")
        ),
    }

    level = _parse_positive_int("SAVEBACKUP_ZSTD_LEVEL", source.get("SAVEBACKUP_ZSTD_LEVEL"))
    if level is not None:
        values["zstd_level"] = level

    extension = source.get("SAVEBACKUP_ARCHIVE_EXTENSION")
    if extension:
        values["archive_extension"] = extension.strip()

    values.update(overrides)
    return ArchiveConfig(**values)


def production_defaults() -> ArchiveConfig:
    """
    Parallel walk, timestamps kept, zstd pre-compressed payloads.

    Produces `.savebackup` archives.
    """

    return ArchiveConfig()


def portable_zip() -> ArchiveConfig:
    """
    Sequential walk with container-level compression.

    Produces `.zip` archives that ordinary ZIP tools can open.
    """

    return ArchiveConfig(
        compression=CompressionPolicy.CONTAINER,
        parallel=False,
        archive_extension="zip",
    )


def uncompressed() -> ArchiveConfig:
    """Parallel walk, payloads stored as-is."""

    return ArchiveConfig(
        compression=CompressionPolicy.NONE,
        archive_extension="zip",
    )
