"""
Catalog facade coordinating entry storage, indices and duplicate detection.

Provides a unified interface to the catalog using the facade pattern: index
maintenance is delegated to IndexSet and the duplicate relations to
DuplicateOperations.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from ..config import DUPLICATE_KEYWORDS
from ..errors import InvalidEntryError, NotFoundError, SnapshotCorruptError
from ..models import CatalogEntry, CatalogStats, normalize_keyword
from ..scanner.hashing import compare_files
from .duplicates import DuplicateOperations
from .indices import IndexName, IndexSet


logger = logging.getLogger(__name__)

# Byte-exact comparison of two files given their paths
Comparator = Callable[[str, str], bool]


class LookupKind(str, Enum):
    """What a lookup key designates (the shell's F / D / K selectors)."""
    FILE = 'F'
    DIRECTORY = 'D'
    KEYWORD = 'K'


class Catalog:
    """
    In-memory, indexed catalog of image files.

    Entries are stored by id; all relations between entries are id sets.
    Every secondary index always reflects exactly the stored entries. The
    catalog is single-threaded: callers must not share it between threads
    without wrapping every call in one lock.

    Usage:
        catalog = Catalog()
        result = probe_file('/photos/a.jpg')
        catalog.add_file(result.entry)

        ids = catalog.find_in_directory('/photos')
        if ids is not None:
            for file_id in ids:
                print(catalog.get_entry(file_id).full_path)
    """

    def __init__(self, comparator: Optional[Comparator] = None):
        """
        Initialize an empty catalog.

        Args:
            comparator: Byte comparison predicate used to confirm duplicates.
                Defaults to compare_files.
        """
        self.comparator: Comparator = comparator or compare_files
        self.dirty = False

        self._entries: dict[int, CatalogEntry] = {}
        self._last_id = 0

        # Initialize components
        self._indices = IndexSet()
        self._duplicates = DuplicateOperations(self)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, file_id) -> bool:
        return file_id in self._entries

    def __repr__(self) -> str:
        return f"Catalog(files={len(self._entries)}, last_id={self._last_id}, dirty={self.dirty})"

    @property
    def last_id(self) -> int:
        """The most recently assigned id (ids are never reused)."""
        return self._last_id

    @property
    def indices(self) -> IndexSet:
        """The live secondary indices (read-only use)."""
        return self._indices

    def mark_saved(self):
        """Record that the current state has been persisted."""
        self.dirty = False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_file(self, entry: CatalogEntry) -> int:
        """
        Insert a freshly probed entry, or update the entry with the same path.

        On update the existing id is reused and the previous record is fully
        removed first; its keywords carry over to the new record, except the
        duplicate-state keywords, which are recomputed. Keywords already on
        the incoming entry are applied as well. Finally the entry is linked
        with every entry sharing its size and checksum (DUP?).

        Pass a new CatalogEntry object for updates; a record that is already
        cataloged must not be modified in place.

        Args:
            entry: Complete entry (id is assigned here)

        Returns:
            The previous id if the path was already cataloged, 0 otherwise

        Raises:
            InvalidEntryError: If a required field is missing, or if the entry
                already carries an id other than the one cataloged for its path
        """
        entry.validate()

        old_id = self.get_file_id(entry.full_path) or 0
        if entry.id not in (0, old_id):
            raise InvalidEntryError(
                f"Entry for {entry.full_path} already has id {entry.id}"
            )
        preserved = set(entry.keywords)
        if old_id:
            preserved |= self._entries[old_id].keywords
            self.remove_file(old_id)
            entry.id = old_id
        else:
            self._last_id += 1
            entry.id = self._last_id
        preserved -= DUPLICATE_KEYWORDS

        entry._clear_keywords()
        entry._clear_duplicate_links()
        self._entries[entry.id] = entry
        self._indices.add_entry(entry)

        for keyword in sorted(preserved):
            self.add_keyword(keyword, entry.id)

        self._duplicates.link_potential_duplicates(entry)
        self.dirty = True

        if old_id:
            logger.debug(f"Updated file {entry.id}: {entry.full_path}")
        else:
            logger.debug(f"Added file {entry.id}: {entry.full_path}")
        return old_id

    def remove_file(self, file_id: int) -> CatalogEntry:
        """
        Remove an entry, severing its duplicate links on both sides.

        Returns:
            The removed entry

        Raises:
            NotFoundError: If file_id is not in the catalog
        """
        entry = self.get_entry(file_id)
        self._duplicates.remove_duplicate_information(entry)
        self._indices.remove_entry(entry)
        del self._entries[file_id]
        self.dirty = True
        logger.debug(f"Removed file {file_id}: {entry.full_path}")
        return entry

    def add_keyword(self, keyword: str, file_id: int) -> bool:
        """
        Attach a keyword (case-insensitive) to an entry.

        Returns:
            True if the entry exists, False if there is nothing to tag

        Raises:
            ValueError: If the keyword is empty
        """
        keyword = normalize_keyword(keyword)
        entry = self._entries.get(file_id)
        if entry is None:
            return False
        if keyword not in entry.keywords:
            entry._add_keyword(keyword)
            self._indices.add(IndexName.KEYWORD, keyword, file_id)
            self.dirty = True
        return True

    def remove_keyword(self, keyword: str, file_id: int) -> bool:
        """
        Detach a keyword (case-insensitive) from an entry.

        Returns:
            True if the entry exists, False otherwise

        Raises:
            ValueError: If the keyword is empty
        """
        keyword = normalize_keyword(keyword)
        entry = self._entries.get(file_id)
        if entry is None:
            return False
        if keyword in entry.keywords:
            entry._discard_keyword(keyword)
            self._indices.remove(IndexName.KEYWORD, keyword, file_id)
            self.dirty = True
        return True

    # Delegate to DuplicateOperations
    def remove_duplicate_information(self, entry: CatalogEntry):
        """Sever all duplicate and potential-duplicate links of an entry."""
        self._duplicates.remove_duplicate_information(entry)

    def find_link_errors(self) -> list[str]:
        """Describe every asymmetric or dangling duplicate link; empty when consistent."""
        return self._duplicates.find_link_errors()

    def process_duplicates(self, file_id: int) -> dict[int, int]:
        """Byte-confirm the duplicates of an entry; see DuplicateOperations."""
        return self._duplicates.process_duplicates(file_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    # Lookups return None when nothing matches and a non-empty frozenset
    # of ids otherwise.

    def get_entry(self, file_id: int) -> CatalogEntry:
        """
        Get the entry with the given id.

        Raises:
            NotFoundError: If file_id is not in the catalog
        """
        try:
            return self._entries[file_id]
        except KeyError:
            raise NotFoundError(f"File {file_id} is not in the catalog") from None

    def entries(self) -> list[CatalogEntry]:
        """Return all entries ordered by id."""
        return [self._entries[file_id] for file_id in sorted(self._entries)]

    def find_by_path(self, full_path: str) -> Optional[frozenset]:
        return self._indices.get(IndexName.PATH, full_path)

    def find_in_directory(self, location: str) -> Optional[frozenset]:
        return self._indices.get(IndexName.LOCATION, location)

    def find_with_keyword(self, keyword: str) -> Optional[frozenset]:
        return self._indices.get(IndexName.KEYWORD, normalize_keyword(keyword))

    def find_by_name(self, name: str) -> Optional[frozenset]:
        return self._indices.get(IndexName.NAME, name)

    def find_by_extension(self, extension: str) -> Optional[frozenset]:
        return self._indices.get(IndexName.EXTENSION, extension)

    def find_with_metadata_tag(self, tag: str) -> Optional[frozenset]:
        return self._indices.get(IndexName.METADATA_TAG, tag)

    def get_file_ids(self, key: str, kind: Union[LookupKind, str]) -> Optional[frozenset]:
        """
        Look up ids by full path, directory or keyword.

        Args:
            key: The path, directory or keyword
            kind: LookupKind or its letter ('F', 'D' or 'K', any case)

        Raises:
            ValueError: If kind is not a known lookup kind
        """
        if isinstance(kind, str):
            kind = LookupKind(kind.upper())
        if kind is LookupKind.FILE:
            return self.find_by_path(key)
        if kind is LookupKind.DIRECTORY:
            return self.find_in_directory(key)
        return self.find_with_keyword(key)

    def get_file_id(self, full_path: str) -> Optional[int]:
        """Return the id cataloged under full_path, or None."""
        file_ids = self.find_by_path(full_path)
        return next(iter(file_ids)) if file_ids else None

    def get_file_id_by_parts(self, location: str, name: str, extension: str) -> Optional[int]:
        """Return the id of the file with this directory, name and extension, or None."""
        file_ids = self._indices.intersection(
            (IndexName.LOCATION, location),
            (IndexName.NAME, name),
            (IndexName.EXTENSION, extension),
        )
        return min(file_ids) if file_ids else None

    def find_potential_duplicate_ids(self, size: int, checksum: int) -> set[int]:
        """Return the ids of all entries with this size and checksum."""
        return self._indices.intersection((IndexName.SIZE, size), (IndexName.CHECKSUM, checksum))

    def keywords(self) -> list[str]:
        """Return the keywords in use, sorted."""
        return self._indices.keys(IndexName.KEYWORD)

    def directories(self) -> list[str]:
        """Return the directories holding cataloged files, sorted."""
        return self._indices.keys(IndexName.LOCATION)

    def duplicate_ids(self) -> set[int]:
        """Return the ids having at least one confirmed duplicate."""
        return set(self._duplicates.confirmed_ids)

    def potential_duplicate_ids(self) -> set[int]:
        """Return the ids having at least one potential duplicate."""
        return set(self._duplicates.potential_ids)

    def statistics(self) -> CatalogStats:
        """Get catalog statistics derived from index sizes and the duplicate sets."""
        return CatalogStats(
            files=len(self._entries),
            directories=self._indices.count(IndexName.LOCATION),
            keywords=self._indices.count(IndexName.KEYWORD),
            duplicates=len(self._duplicates.confirmed_ids),
            potential_duplicates=len(self._duplicates.potential_ids),
        )

    # ------------------------------------------------------------------
    # Restoration
    # ------------------------------------------------------------------

    @classmethod
    def restore(
        cls,
        entries: Iterable[CatalogEntry],
        last_id: int,
        comparator: Optional[Comparator] = None,
    ) -> 'Catalog':
        """
        Rebuild a catalog from a persisted entry table.

        Indices and the global duplicate sets are derived from the entries.

        Args:
            entries: Entries carrying their ids, keywords and links
            last_id: Last assigned id; must not be below any entry id
            comparator: See __init__

        Returns:
            A catalog that is not dirty

        Raises:
            SnapshotCorruptError: If ids or paths repeat, an entry is
                incomplete, or a duplicate link is dangling or one-sided
        """
        catalog = cls(comparator=comparator)
        paths = set()

        for entry in entries:
            try:
                entry.validate()
            except InvalidEntryError as e:
                raise SnapshotCorruptError(f"Invalid entry {entry.id}: {e}") from e
            if entry.id <= 0:
                raise SnapshotCorruptError(f"Entry without id: {entry.full_path}")
            if entry.id in catalog._entries:
                raise SnapshotCorruptError(f"Duplicate entry id {entry.id}")
            if entry.full_path in paths:
                raise SnapshotCorruptError(f"Path cataloged twice: {entry.full_path}")
            paths.add(entry.full_path)
            catalog._entries[entry.id] = entry

        if isinstance(last_id, bool) or not isinstance(last_id, int) or last_id < max(catalog._entries, default=0):
            raise SnapshotCorruptError(f"Last id {last_id!r} is below the highest entry id")
        catalog._last_id = last_id

        errors = catalog._duplicates.find_link_errors()
        if errors:
            raise SnapshotCorruptError(f"Inconsistent duplicate links: {'; '.join(errors[:5])}")

        catalog._indices = IndexSet.from_entries(catalog._entries.values())
        catalog._duplicates.rebuild()
        catalog.dirty = False
        logger.debug(f"Restored catalog with {len(catalog)} files")
        return catalog


__all__ = ['Catalog', 'Comparator', 'LookupKind']
