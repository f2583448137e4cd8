# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Archive container - zstd payload codec and the shared archive writer.
"""

from savebackup.archive.compressor import (
    compress_file,
    decompress_stream,
    get_compression_stats,
)

from savebackup.archive.writer import (
    ArchiveWriter,
    container_method,
    decode_policy_comment,
)

__all__ = [
    # Compressor
    "compress_file",
    "decompress_stream",
    "get_compression_stats",
    # Writer
    "ArchiveWriter",
    "container_method",
    "decode_policy_comment",
]
