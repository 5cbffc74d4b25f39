"""
Exception hierarchy for Photo Catalog.

Every error raised by the catalog engine and its snapshot store derives from
CatalogError, so the shell can report any of them without stopping.
"""


class CatalogError(Exception):
    """Base exception for all catalog errors."""
    pass


class NotFoundError(CatalogError):
    """Raised when a referenced id, path, keyword or directory is not cataloged."""
    pass


class InvalidEntryError(CatalogError, ValueError):
    """Raised when a catalog entry has a missing or out-of-range field."""
    pass


class SnapshotError(CatalogError):
    """Base class for snapshot loading and saving failures."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class SnapshotAbsentError(SnapshotError):
    """Raised when no persisted snapshot exists (an empty catalog is used instead)."""
    pass


class SnapshotCorruptError(SnapshotError):
    """Raised when a snapshot is unreadable or of an incompatible version."""
    pass


class PersistenceIOError(SnapshotError):
    """Raised when reading or writing a snapshot fails for environmental reasons."""
    pass


__all__ = [
    'CatalogError',
    'NotFoundError',
    'InvalidEntryError',
    'SnapshotError',
    'SnapshotAbsentError',
    'SnapshotCorruptError',
    'PersistenceIOError',
]
