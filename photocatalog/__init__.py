"""
Photo Catalog
=============
An indexed catalog of image files with keyword tagging and duplicate detection.

Features:
- Indexed lookup by path, directory, name, extension, timestamp, size,
  checksum, keyword and metadata tag
- Two-stage duplicate detection: size + CRC-32 checksum, then byte comparison
- Keywords preserved across rescans; vanished and modified files tagged
- EXIF metadata and capture time via Pillow (HEIC/HEIF via pillow-heif)
- Versioned JSON snapshots with indices rebuilt on load
- Interactive command shell
"""

__version__ = "1.0.0"

from .errors import (
    CatalogError,
    NotFoundError,
    InvalidEntryError,
    SnapshotError,
    SnapshotAbsentError,
    SnapshotCorruptError,
    PersistenceIOError,
)
from .models import CatalogEntry, CatalogStats, MetadataTag, normalize_keyword
from .config import (
    IMAGE_EXTENSIONS,
    KEYWORD_DUPLICATE,
    KEYWORD_POTENTIAL_DUPLICATE,
    KEYWORD_CHANGED,
    KEYWORD_DELETED,
)
from .catalog import (
    Catalog,
    CatalogStore,
    IndexName,
    IndexSet,
    LoadStatus,
    LookupKind,
    open_catalog,
)
from .scanner import (
    add_path,
    compare_files,
    find_image_files,
    probe_file,
    rescan,
    resolve_duplicates,
)

__all__ = [
    "CatalogError",
    "NotFoundError",
    "InvalidEntryError",
    "SnapshotError",
    "SnapshotAbsentError",
    "SnapshotCorruptError",
    "PersistenceIOError",
    "CatalogEntry",
    "CatalogStats",
    "MetadataTag",
    "normalize_keyword",
    "IMAGE_EXTENSIONS",
    "KEYWORD_DUPLICATE",
    "KEYWORD_POTENTIAL_DUPLICATE",
    "KEYWORD_CHANGED",
    "KEYWORD_DELETED",
    "Catalog",
    "CatalogStore",
    "IndexName",
    "IndexSet",
    "LoadStatus",
    "LookupKind",
    "open_catalog",
    "add_path",
    "compare_files",
    "find_image_files",
    "probe_file",
    "rescan",
    "resolve_duplicates",
]
