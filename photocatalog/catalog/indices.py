"""
Secondary indices of the catalog.

Each index maps a key (a field value such as a directory or a checksum) to the
set of entry ids sharing it. A key is present only while its id set is
non-empty, so the number of keys in an index is the number of distinct values
in use (directory and keyword counts are read straight from it).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Hashable, Iterable, Optional

from ..models import CatalogEntry


logger = logging.getLogger(__name__)


class IndexName(str, Enum):
    """The secondary indices kept for every cataloged file."""
    PATH = 'path'
    LOCATION = 'location'
    NAME = 'name'
    EXTENSION = 'extension'
    TIMESTAMP = 'timestamp'
    SIZE = 'size'
    CHECKSUM = 'checksum'
    KEYWORD = 'keyword'
    METADATA_TAG = 'metadata_tag'


# Indices keyed by integers; every other index is keyed by non-empty strings
INTEGER_INDICES = frozenset({IndexName.SIZE, IndexName.CHECKSUM})

# Entry attribute feeding each single-valued index
FIELD_INDICES = {
    IndexName.PATH: 'full_path',
    IndexName.LOCATION: 'location',
    IndexName.NAME: 'name',
    IndexName.EXTENSION: 'extension',
    IndexName.TIMESTAMP: 'timestamp',
    IndexName.SIZE: 'size',
    IndexName.CHECKSUM: 'checksum',
}


class IndexSet:
    """
    The collection of secondary indices.

    Invariant: for every index and key, the id set equals exactly the ids of
    the entries whose corresponding field equals the key.
    """

    def __init__(self):
        self._indices: dict[IndexName, dict[Hashable, set[int]]] = {
            name: {} for name in IndexName
        }

    @classmethod
    def from_entries(cls, entries: Iterable[CatalogEntry]) -> 'IndexSet':
        """Build all indices from scratch for the given entries."""
        index_set = cls()
        for entry in entries:
            index_set.add_entry(entry)
        return index_set

    def __eq__(self, other) -> bool:
        if not isinstance(other, IndexSet):
            return NotImplemented
        return self._indices == other._indices

    def __repr__(self) -> str:
        sizes = ', '.join(f"{name.value}={len(buckets)}" for name, buckets in self._indices.items())
        return f"IndexSet({sizes})"

    @staticmethod
    def _check_key(index: IndexName, key: Hashable) -> None:
        if index in INTEGER_INDICES:
            if isinstance(key, bool) or not isinstance(key, int):
                raise ValueError(f"Key for index '{index.value}' must be an integer, got {key!r}")
        elif not isinstance(key, str) or not key:
            raise ValueError(f"Key for index '{index.value}' must be a non-empty string")

    def add(self, index: IndexName, key: Hashable, file_id: int) -> None:
        """
        Insert file_id into the bucket for key, creating the bucket if needed.

        Raises:
            ValueError: If the key is empty (string indices) or not an integer
        """
        self._check_key(index, key)
        self._indices[index].setdefault(key, set()).add(file_id)

    def remove(self, index: IndexName, key: Hashable, file_id: int) -> None:
        """Remove file_id from the bucket for key, dropping the key once it is empty."""
        buckets = self._indices[index]
        file_ids = buckets.get(key)
        if file_ids is None:
            return
        file_ids.discard(file_id)
        if not file_ids:
            del buckets[key]

    def get(self, index: IndexName, key: Hashable) -> Optional[frozenset]:
        """
        Look up the ids sharing key.

        Returns:
            The ids (never empty), or None when the key is not in the index
        """
        file_ids = self._indices[index].get(key)
        if file_ids is None:
            return None
        return frozenset(file_ids)

    def contains(self, index: IndexName, key: Hashable) -> bool:
        return key in self._indices[index]

    def keys(self, index: IndexName) -> list:
        """Return the occupied keys of an index, sorted."""
        return sorted(self._indices[index])

    def count(self, index: IndexName) -> int:
        """Return the number of distinct occupied keys in an index."""
        return len(self._indices[index])

    def intersection(self, *lookups: tuple[IndexName, Hashable]) -> set[int]:
        """
        Return the ids present in every one of the given (index, key) buckets.

        Example:
            index_set.intersection((IndexName.SIZE, 100), (IndexName.CHECKSUM, 42))
        """
        result: Optional[set[int]] = None
        for index, key in lookups:
            file_ids = self._indices[index].get(key)
            if not file_ids:
                return set()
            result = set(file_ids) if result is None else result & file_ids
        return result or set()

    def add_entry(self, entry: CatalogEntry) -> None:
        """Index every field value, metadata tag name and keyword of an entry."""
        for index, attribute in FIELD_INDICES.items():
            self.add(index, getattr(entry, attribute), entry.id)
        for tag in entry.metadata:
            if tag.tag:
                self.add(IndexName.METADATA_TAG, tag.tag, entry.id)
        for keyword in entry.keywords:
            self.add(IndexName.KEYWORD, keyword, entry.id)
        logger.debug(f"Indexed file {entry.id}: {entry.full_path}")

    def remove_entry(self, entry: CatalogEntry) -> None:
        """Remove an entry from every bucket its field values, tags and keywords map to."""
        for index, attribute in FIELD_INDICES.items():
            self.remove(index, getattr(entry, attribute), entry.id)
        for tag in entry.metadata:
            self.remove(IndexName.METADATA_TAG, tag.tag, entry.id)
        for keyword in entry.keywords:
            self.remove(IndexName.KEYWORD, keyword, entry.id)
        logger.debug(f"Unindexed file {entry.id}: {entry.full_path}")

    def clear(self) -> None:
        for buckets in self._indices.values():
            buckets.clear()


__all__ = ['IndexName', 'IndexSet', 'FIELD_INDICES', 'INTEGER_INDICES']
