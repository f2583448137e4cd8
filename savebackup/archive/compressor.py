# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Save Backup Compressor - zstd pre-compression for archive payloads.

Pre-compressed payloads are written into the container with the
"stored" method, so the container never compresses them a second time.
Encoding streams straight from the source file and decoding streams
straight into the destination file through a bounded buffer.
"""

import io
from pathlib import Path
from typing import BinaryIO, Tuple

import structlog
import zstandard as zstd

from savebackup.exceptions import ArchiveIOError, CodecError
from savebackup.paths import display_path

logger = structlog.get_logger()

# Scratch buffer size for streaming copies
COPY_BUFFER_SIZE = 1024 * 1024

DEFAULT_ZSTD_LEVEL = 1


def compress_file(path: Path, level: int = DEFAULT_ZSTD_LEVEL) -> Tuple[bytes, int]:
    """
    Read a file and zstd-compress its contents as a single frame.

    Args:
        path: File to read
        level: zstd compression level (1-22)

    Returns:
        Tuple of (compressed bytes, original size)
    """
    cctx = zstd.ZstdCompressor(level=level)
    buffer = io.BytesIO()
    try:
        with open(path, "rb") as source:
            original_size, _ = cctx.copy_stream(
                source, buffer, read_size=COPY_BUFFER_SIZE
            )
    except zstd.ZstdError as e:
        raise CodecError(
            f"Compression failed for {display_path(path)}: {e}",
            details={"path": display_path(path)},
        ) from e
    except OSError as e:
        raise ArchiveIOError(
            f"Failed to read {display_path(path)}: {e}",
            details={"path": display_path(path)},
        ) from e

    compressed = buffer.getvalue()
    logger.debug(
        "compression_complete",
        path=display_path(path),
        original_size=original_size,
        compressed_size=len(compressed),
    )
    return compressed, original_size


def decompress_stream(source: BinaryIO, destination: BinaryIO) -> int:
    """
    Decode a zstd stream from source into destination.

    Frames written without a content size are handled too, since the
    decoder never needs the whole payload in memory.

    Returns:
        Number of decompressed bytes written
    """
    dctx = zstd.ZstdDecompressor()
    try:
        _, written = dctx.copy_stream(
            source,
            destination,
            read_size=COPY_BUFFER_SIZE,
            write_size=COPY_BUFFER_SIZE,
        )
    except zstd.ZstdError as e:
        raise CodecError(f"Decompression failed: {e}") from e
    return written


def get_compression_stats(
    original_size: int,
    compressed_size: int,
) -> dict:
    """
    Calculate compression statistics.

    Args:
        original_size: Original data size in bytes
        compressed_size: Compressed data size in bytes

    Returns:
        Dict with compression statistics
    """
    if compressed_size == 0:
        return {
            "original_size": original_size,
            "compressed_size": compressed_size,
            "compression_ratio": 0,
            "space_saved_bytes": 0,
            "space_saved_percent": 0,
        }

    ratio = original_size / compressed_size
    saved_bytes = original_size - compressed_size
    saved_percent = (saved_bytes / original_size) * 100 if original_size > 0 else 0

    return {
        "original_size": original_size,
        "compressed_size": compressed_size,
        "compression_ratio": round(ratio, 2),
        "space_saved_bytes": saved_bytes,
        "space_saved_percent": round(saved_percent, 2),
    }
