"""
File probe for the scanner package.

Builds a fresh CatalogEntry for a file on disk: canonical path, name parts,
timestamp, size, CRC-32 checksum and metadata. Each call reports its own
outcome in the returned ProbeResult.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from ..config import TIMESTAMP_FORMAT
from ..models import CatalogEntry
from .dependencies import _logger
from .file_discovery import PathKind, check_path, is_image_file, split_filename
from .hashing import calculate_checksum
from .metadata import read_capture_timestamp, read_metadata


class ProbeStatus(Enum):
    """Outcome of probing one path."""
    OK = 'ok'
    NOT_FOUND = 'not_found'
    NOT_A_FILE = 'not_a_file'
    NOT_AN_IMAGE = 'not_an_image'
    NO_EXTENSION = 'no_extension'
    READ_ERROR = 'read_error'


@dataclass
class ProbeResult:
    """
    Result of probing one path.

    Attributes:
        path: Canonical path that was probed
        status: Outcome of the probe
        entry: The probed entry when status is OK, otherwise None
        message: Error detail for failed probes
    """
    path: str
    status: ProbeStatus
    entry: Optional[CatalogEntry] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ProbeStatus.OK


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as a catalog timestamp ('yyyyMMdd HHmmss')."""
    return moment.strftime(TIMESTAMP_FORMAT)


def probe_file(
    filepath: str | Path,
    full_info: bool = True,
    prefer_exif_timestamp: bool = True,
) -> ProbeResult:
    """
    Probe a file and build its catalog entry.

    Args:
        filepath: Path to the file (relative paths and symlinks are resolved)
        full_info: If False, only the identity fields (path, location, name,
            extension) are filled in. Such an entry can be used to look a
            file up but is not complete enough to be added.
        prefer_exif_timestamp: Use the EXIF capture time when available
            instead of the file modification time

    Returns:
        ProbeResult with the entry on success

    Example:
        result = probe_file('IMG_0001.JPG')
        if result.ok:
            catalog.add_file(result.entry)
    """
    path = os.path.realpath(os.path.abspath(filepath))

    kind = check_path(path)
    if kind is PathKind.MISSING:
        return ProbeResult(path, ProbeStatus.NOT_FOUND, message="File not found")
    if kind is PathKind.DIRECTORY:
        return ProbeResult(path, ProbeStatus.NOT_A_FILE, message="Path is a directory")

    location, filename = os.path.split(path)
    name, extension = split_filename(filename)
    if not extension:
        return ProbeResult(path, ProbeStatus.NO_EXTENSION, message="File has no extension")
    if not is_image_file(filename):
        return ProbeResult(path, ProbeStatus.NOT_AN_IMAGE, message=f"Unsupported file type: .{extension}")

    entry = CatalogEntry(full_path=path, location=location, name=name, extension=extension)
    if not full_info:
        return ProbeResult(path, ProbeStatus.OK, entry)

    try:
        stat = os.stat(path)
        checksum = calculate_checksum(path)
    except OSError as e:
        _logger.debug(f"Probe failed for {path}: {e}")
        return ProbeResult(path, ProbeStatus.READ_ERROR, message=str(e))

    metadata = read_metadata(path)

    timestamp = read_capture_timestamp(metadata) if prefer_exif_timestamp else None
    if timestamp is None:
        timestamp = format_timestamp(datetime.fromtimestamp(stat.st_mtime))

    entry.timestamp = timestamp
    entry.size = stat.st_size
    entry.checksum = checksum
    entry.metadata = metadata
    return ProbeResult(path, ProbeStatus.OK, entry)


__all__ = [
    'ProbeStatus',
    'ProbeResult',
    'format_timestamp',
    'probe_file',
]
