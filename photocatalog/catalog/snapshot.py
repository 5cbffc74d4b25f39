"""
Snapshot encoding for the catalog.

A snapshot is a JSON-compatible dict holding the entry table and the id
counter. Secondary indices and the global duplicate sets are not stored;
they are rebuilt when the snapshot is loaded.

Format:
    {
        "format": "photocatalog-snapshot",
        "version": 1,
        "saved_at": "2024-05-01T10:00:00",
        "last_id": 3,
        "entries": [CatalogEntry.to_dict(), ...]
    }
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..config import SNAPSHOT_FORMAT, SNAPSHOT_VERSION
from ..errors import InvalidEntryError, SnapshotCorruptError
from ..models import CatalogEntry
from .core import Catalog, Comparator


def catalog_to_snapshot(catalog: Catalog) -> dict:
    """
    Encode a catalog as a snapshot dict.

    Args:
        catalog: Catalog to encode

    Returns:
        JSON-serializable snapshot
    """
    return {
        'format': SNAPSHOT_FORMAT,
        'version': SNAPSHOT_VERSION,
        'saved_at': datetime.now().isoformat(timespec='seconds'),
        'last_id': catalog.last_id,
        'entries': [entry.to_dict() for entry in catalog.entries()],
    }


def catalog_from_snapshot(data, comparator: Optional[Comparator] = None) -> Catalog:
    """
    Decode a snapshot dict into a catalog.

    Args:
        data: Decoded JSON document
        comparator: Comparator for the restored catalog

    Returns:
        The restored catalog (not dirty)

    Raises:
        SnapshotCorruptError: If the document is not a snapshot, has an
            unsupported version, or holds invalid entries
    """
    if not isinstance(data, dict) or data.get('format') != SNAPSHOT_FORMAT:
        raise SnapshotCorruptError("Not a photo catalog snapshot")

    version = data.get('version')
    if version != SNAPSHOT_VERSION:
        raise SnapshotCorruptError(
            f"Incompatible snapshot version {version!r} (expected {SNAPSHOT_VERSION})"
        )

    raw_entries = data.get('entries')
    if not isinstance(raw_entries, list):
        raise SnapshotCorruptError("Snapshot has no entry table")

    entries = []
    for position, raw in enumerate(raw_entries):
        try:
            entries.append(CatalogEntry.from_dict(raw))
        except (InvalidEntryError, KeyError, TypeError, ValueError) as e:
            raise SnapshotCorruptError(f"Invalid entry at position {position}: {e}") from e

    return Catalog.restore(entries, data.get('last_id'), comparator=comparator)


__all__ = ['catalog_to_snapshot', 'catalog_from_snapshot']
