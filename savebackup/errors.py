# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Human-friendly error message helpers for savebackup.

These helpers centralize wording for common configuration errors so that
all modules present consistent, actionable messages.
"""


def explain_invalid_compression_env(value: str | None) -> str:
    """
    Explain that SAVEBACKUP_COMPRESSION is invalid.
    """

    return (
        f"Invalid SAVEBACKUP_COMPRESSION value: {value!r}. "
        "Expected one of: 'precompressed', 'container', or 'none'."
    )


def explain_invalid_bool_env(name: str, value: str | None) -> str:
    """
    Explain that a boolean switch in the environment is invalid.
    """

    return (
        f"Invalid {name} value: {value!r}. "
        "Use one of 1/0, true/false, yes/no or on/off."
    )


def explain_invalid_int_env(name: str, value: str | None) -> str:
    """
    Explain that an integer setting in the environment is invalid.
    """

    return f"Invalid {name} value: {value!r}. It must be a positive integer."


def explain_invalid_extension(value: str | None) -> str:
    """
    Explain that the archive extension cannot be used in a file name.
    """

    return (
        f"Invalid archive extension: {value!r}. "
        "It must be non-empty and contain no dots or path separators, e.g. 'zip'."
    )


def explain_missing_save_directory(path: str) -> str:
    """
    Explain that the save directory to back up is missing.
    """

    return (
        f"Save directory does not exist or is not a directory: {path}. "
        "Pass the folder that holds the save, not a file inside it."
    )
