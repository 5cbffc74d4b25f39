"""
Indexed in-memory catalog engine for Photo Catalog.

Provides:
- Entry storage with secondary indices kept consistent on every change
- Two-phase duplicate detection (size + checksum, then byte comparison)
- Keyword tagging and lookup
- Versioned JSON snapshots with indices rebuilt on load

Public API:
- Catalog: Main catalog facade
- IndexSet, IndexName: Secondary indices
- LookupKind: File / directory / keyword lookup selector
- CatalogStore, open_catalog(), LoadStatus: Snapshot persistence
"""

from .core import Catalog, Comparator, LookupKind
from .duplicates import DuplicateOperations
from .indices import IndexName, IndexSet
from .snapshot import catalog_from_snapshot, catalog_to_snapshot
from .store import CatalogStore, LoadStatus, open_catalog, resolve_db_filename


__all__ = [
    'Catalog',
    'Comparator',
    'LookupKind',
    'DuplicateOperations',
    'IndexName',
    'IndexSet',
    'catalog_from_snapshot',
    'catalog_to_snapshot',
    'CatalogStore',
    'LoadStatus',
    'open_catalog',
    'resolve_db_filename',
]
