# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Path normalization shared by the backup and restore engines.

Backup stores every entry under a forward-slash relative path built
only from normal path segments; restore maps those stored paths back
onto a destination directory and refuses anything that would land
outside of it.
"""

import os
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import Tuple

from savebackup.exceptions import InvalidPathError


def display_path(path: str | os.PathLike) -> str:
    """Text form of a path with bytes that are not valid UTF-8 replaced by U+FFFD."""
    return os.fsencode(path).decode("utf-8", "replace")


def _normal_parts(path: PurePath) -> list[str]:
    """Drop anchors, `.` and `..` segments, and empty segments."""
    return [
        display_path(part)
        for part in path.parts
        if part not in ("", ".", "..") and part != path.anchor
    ]


def normalize_entry_path(path: str | os.PathLike, base: str | os.PathLike | None = None) -> str:
    """
    Convert a filesystem path into the path stored inside the archive.

    When base is given, path is first made relative to it. Only normal
    segments are kept, so drive letters, roots and `.`/`..` never reach
    the archive. Names that are not valid UTF-8 are stored with U+FFFD
    replacement characters. Normalizing an already-normalized path is a
    no-op.

    Args:
        path: Filesystem path of the walked entry
        base: Directory the stored path is relative to

    Returns:
        Forward-slash joined relative path (may be empty)
    """
    pure = PurePath(path)
    if base is not None:
        try:
            pure = pure.relative_to(PurePath(base))
        except ValueError as e:
            raise InvalidPathError(
                f"Entry is outside the backup base: {path}",
                details={"path": str(path), "base": str(base)},
            ) from e
    return "/".join(_normal_parts(pure))


def split_stored_path(stored_path: str) -> Tuple[str, ...]:
    """
    Validate a stored path read from an archive and split it into segments.

    Archives are untrusted input, so anything that is not a plain
    relative path is rejected instead of being silently rewritten.

    Raises:
        InvalidPathError: path is empty, absolute, drive-qualified or
            contains `..` segments
    """
    unified = stored_path.replace("\\", "/")

    if not unified.strip("/"):
        raise InvalidPathError(
            "Archive entry has an empty path",
            details={"stored_path": stored_path},
        )

    posix = PurePosixPath(unified)
    windows = PureWindowsPath(unified)
    if posix.is_absolute() or windows.drive or windows.root:
        raise InvalidPathError(
            f"Absolute path in archive entry: {stored_path}",
            details={"stored_path": stored_path},
        )

    parts = []
    for part in posix.parts:
        if part in ("", "."):
            continue
        if part == "..":
            raise InvalidPathError(
                f"Path traversal in archive entry: {stored_path}",
                details={"stored_path": stored_path},
            )
        parts.append(part)

    if not parts:
        raise InvalidPathError(
            "Archive entry has an empty path",
            details={"stored_path": stored_path},
        )
    return tuple(parts)


def resolve_target(dest_root: Path, stored_path: str) -> Path:
    """
    Map a stored path onto the destination root.

    The resolved target must stay inside the resolved root, which also
    catches symlinked directories already present in the destination.
    """
    parts = split_stored_path(stored_path)
    root = dest_root.resolve()
    target = root.joinpath(*parts)

    resolved = target.resolve()
    if resolved != root and root not in resolved.parents:
        raise InvalidPathError(
            f"Archive entry escapes the destination: {stored_path}",
            details={"stored_path": stored_path, "destination": str(root)},
        )
    return target
