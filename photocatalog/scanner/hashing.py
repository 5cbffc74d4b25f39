"""
Hashing module for the scanner package.

Provides the CRC-32 content checksum used to find potential duplicates and
the byte-exact comparison used to confirm them.
"""

from __future__ import annotations

import os
import zlib
from pathlib import Path

from ..config import CHECKSUM_CHUNK_SIZE
from .dependencies import _logger


def calculate_checksum(filepath: str | Path) -> int:
    """
    Calculate the CRC-32 checksum of a file.

    Args:
        filepath: Path to the file

    Returns:
        Unsigned 32-bit CRC of the file contents

    Raises:
        OSError: If the file cannot be read
    """
    crc = 0
    with open(filepath, 'rb') as f:
        for chunk in iter(lambda: f.read(CHECKSUM_CHUNK_SIZE), b''):
            crc = zlib.crc32(chunk, crc)
    return crc & 0xFFFFFFFF


def compare_files(first: str | Path, second: str | Path) -> bool:
    """
    Check whether two files have byte-identical contents.

    Args:
        first: Path to the first file
        second: Path to the second file

    Returns:
        True if both are regular files with the same bytes. False if either
        is missing or not a regular file, if their sizes differ, or if
        reading fails.
    """
    if not os.path.isfile(first) or not os.path.isfile(second):
        return False

    try:
        if os.path.getsize(first) != os.path.getsize(second):
            return False

        with open(first, 'rb') as f1, open(second, 'rb') as f2:
            while True:
                chunk1 = f1.read(CHECKSUM_CHUNK_SIZE)
                chunk2 = f2.read(CHECKSUM_CHUNK_SIZE)
                if chunk1 != chunk2:
                    return False
                if not chunk1:
                    return True
    except OSError as e:
        _logger.debug(f"Byte comparison failed for {first} and {second}: {e}")
        return False


__all__ = [
    'calculate_checksum',
    'compare_files',
]
