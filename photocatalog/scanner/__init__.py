"""
Scanner package for Photo Catalog.

Provides the file-system side of the catalog: probing files into catalog
entries, reading image metadata, checksums and byte comparison, and the
workflows that feed the catalog.

Public API:
- find_image_files: Discover image files in directories
- check_path: Classify a path as file, directory or missing
- calculate_checksum: CRC-32 checksum of a file
- compare_files: Byte-exact comparison of two files
- read_metadata: Image and EXIF metadata tags
- probe_file: Build a CatalogEntry for one file
- add_path / rescan / resolve_duplicates: Catalog workflows
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

# Import public functions from submodules
from .file_discovery import (
    PathKind,
    check_path,
    find_image_files,
    is_image_file,
    split_filename,
)
from .hashing import calculate_checksum, compare_files
from .metadata import read_capture_timestamp, read_metadata
from .probe import ProbeResult, ProbeStatus, probe_file
from .sync import SyncSummary, add_path, rescan, resolve_duplicates

# Import dependencies for has_heif_support function
from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


# Public API exports
__all__ = [
    # File discovery
    'PathKind',
    'check_path',
    'find_image_files',
    'is_image_file',
    'split_filename',
    # Checksums and comparison
    'calculate_checksum',
    'compare_files',
    # Metadata
    'read_metadata',
    'read_capture_timestamp',
    # Probe
    'ProbeResult',
    'ProbeStatus',
    'probe_file',
    # Workflows
    'SyncSummary',
    'add_path',
    'rescan',
    'resolve_duplicates',
    # Feature detection
    'has_heif_support',
]
