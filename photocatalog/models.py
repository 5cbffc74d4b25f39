"""
Data models for Photo Catalog.

Contains the CatalogEntry record for one tracked file, the MetadataTag triple
extracted from image metadata, and the CatalogStats summary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, NamedTuple

from .errors import InvalidEntryError


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


def normalize_keyword(keyword: str) -> str:
    """
    Normalize a keyword for storage and lookup.

    Keywords are case-insensitive and stored upper-cased. Surrounding
    whitespace is rejected rather than trimmed, so ' a' never merges into 'A'.

    Raises:
        ValueError: If the keyword is empty, not a string, or padded with whitespace
    """
    if not isinstance(keyword, str) or not keyword or keyword != keyword.strip():
        raise ValueError("Keyword must be a non-empty string without leading or trailing whitespace")
    return keyword.upper()


class MetadataTag(NamedTuple):
    """One metadata tag: its directory (group), tag name and value description."""
    directory: str
    tag: str
    description: str

    @classmethod
    def create(cls, directory: Any, tag: Any, description: Any) -> 'MetadataTag':
        """Create a tag, replacing missing parts with empty strings."""
        return cls(
            str(directory) if directory is not None else "",
            str(tag) if tag is not None else "",
            str(description) if description is not None else "",
        )


# Fields that must hold a non-empty string once the entry is complete
REQUIRED_TEXT_FIELDS = ('full_path', 'location', 'name', 'extension', 'timestamp')


def _check_text(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise InvalidEntryError(f"{name} must be a non-empty string")


def _check_non_negative(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidEntryError(f"{name} must be a non-negative integer, got {value!r}")


def _check_id(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidEntryError(f"{name} must be a positive integer, got {value!r}")


def _as_tags(value: Any) -> set:
    if value is None:
        return set()
    if isinstance(value, (str, bytes)):
        raise InvalidEntryError(f"metadata must be a collection of tags, got {value!r}")
    try:
        items = list(value)
    except TypeError:
        raise InvalidEntryError(f"metadata must be a collection of tags, got {value!r}") from None

    tags = set()
    for tag in items:
        if isinstance(tag, MetadataTag):
            tags.add(tag)
        elif isinstance(tag, (tuple, list)) and len(tag) == 3:
            tags.add(MetadataTag.create(*tag))
        else:
            raise InvalidEntryError(f"Invalid metadata tag {tag!r}")
    return tags


_SETTER_CHECKS = {
    'id': _check_id,
    'full_path': _check_text,
    'location': _check_text,
    'name': _check_text,
    'extension': _check_text,
    'timestamp': _check_text,
    'size': _check_non_negative,
    'checksum': _check_non_negative,
}


@dataclass
class CatalogEntry:
    """
    The record for one cataloged file.

    A fresh record (as produced by the file probe) has id 0. The catalog
    assigns the id on insertion. Every assignment after construction is
    validated; keywords and duplicate links are read-only here and are
    changed only through the Catalog, which keeps its indices and the
    duplicate relation consistent on both endpoints.

    Attributes:
        id: Catalog identifier (0 until assigned, positive afterwards)
        full_path: Absolute path including the file name
        location: Directory containing the file
        name: File name without extension
        extension: File extension without the dot
        timestamp: Capture or modification time, 'yyyyMMdd HHmmss'
        size: Size in bytes
        checksum: CRC-32 of the file contents
        metadata: Set of MetadataTag triples read from the file; plain
            (directory, tag, description) triples are converted on assignment
    """
    id: int = 0
    full_path: str = ""
    location: str = ""
    name: str = ""
    extension: str = ""
    timestamp: str = ""
    size: int = 0
    checksum: int = 0
    metadata: set = field(default_factory=set)
    _keywords: set = field(default_factory=set, init=False, repr=False)
    _duplicates: set = field(default_factory=set, init=False, repr=False)
    _potential_duplicates: set = field(default_factory=set, init=False, repr=False)

    def __post_init__(self):
        for name in REQUIRED_TEXT_FIELDS:
            if not isinstance(getattr(self, name), str):
                raise InvalidEntryError(f"{name} must be a string")
        _check_non_negative('id', self.id)
        _check_non_negative('size', self.size)
        _check_non_negative('checksum', self.checksum)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == 'metadata':
            value = _as_tags(value)
        # The first assignment of each field happens in __init__
        check = _SETTER_CHECKS.get(name)
        if check is not None and name in self.__dict__:
            check(name, value)
            if name == 'id' and self.id and value != self.id:
                raise InvalidEntryError(f"id of file {self.id} cannot be changed to {value!r}")
        super().__setattr__(name, value)

    def validate(self) -> None:
        """
        Check that every required field is set.

        Raises:
            InvalidEntryError: Naming the missing fields, or if a metadata
                item added in place is not a MetadataTag
        """
        missing = [name for name in REQUIRED_TEXT_FIELDS if not getattr(self, name)]
        if missing:
            raise InvalidEntryError(f"Entry is missing required fields: {', '.join(missing)}")
        if any(not isinstance(tag, MetadataTag) for tag in self.metadata):
            raise InvalidEntryError("Entry metadata holds values that are not MetadataTag triples")

    @property
    def filename(self) -> str:
        """Return the file name with its extension."""
        return f"{self.name}.{self.extension}" if self.extension else self.name

    @property
    def size_formatted(self) -> str:
        """Return human-readable file size."""
        return format_size(self.size)

    @property
    def checksum_hex(self) -> str:
        """Return the checksum as 8 hex digits."""
        return f"{self.checksum:08X}"

    @property
    def keywords(self) -> frozenset:
        """Keywords attached to this file (upper-cased)."""
        return frozenset(self._keywords)

    @property
    def duplicates(self) -> frozenset:
        """Ids of files confirmed byte-identical to this one."""
        return frozenset(self._duplicates)

    @property
    def potential_duplicates(self) -> frozenset:
        """Ids of files sharing size and checksum, not yet byte-compared."""
        return frozenset(self._potential_duplicates)

    def has_keyword(self, keyword: str) -> bool:
        return normalize_keyword(keyword) in self._keywords

    # Catalog-internal mutators. Callers outside the catalog package must go
    # through Catalog so indices and both link endpoints stay in step.

    def _add_keyword(self, keyword: str) -> None:
        self._keywords.add(keyword)

    def _discard_keyword(self, keyword: str) -> None:
        self._keywords.discard(keyword)

    def _clear_keywords(self) -> None:
        self._keywords.clear()

    def _add_duplicate(self, file_id: int) -> None:
        if file_id == self.id:
            raise ValueError(f"File {self.id} cannot be its own duplicate")
        self._duplicates.add(file_id)

    def _discard_duplicate(self, file_id: int) -> None:
        self._duplicates.discard(file_id)

    def _add_potential_duplicate(self, file_id: int) -> None:
        if file_id == self.id:
            raise ValueError(f"File {self.id} cannot be its own potential duplicate")
        self._potential_duplicates.add(file_id)

    def _discard_potential_duplicate(self, file_id: int) -> None:
        self._potential_duplicates.discard(file_id)

    def _clear_duplicate_links(self) -> None:
        self._duplicates.clear()
        self._potential_duplicates.clear()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'full_path': self.full_path,
            'location': self.location,
            'name': self.name,
            'extension': self.extension,
            'timestamp': self.timestamp,
            'size': self.size,
            'checksum': self.checksum,
            'keywords': sorted(self._keywords),
            'metadata': [list(tag) for tag in sorted(self.metadata)],
            'duplicates': sorted(self._duplicates),
            'potential_duplicates': sorted(self._potential_duplicates),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'CatalogEntry':
        """
        Create a CatalogEntry from a dictionary produced by to_dict().

        Raises:
            InvalidEntryError: If a field value is out of range
            KeyError: If a required field is missing
        """
        entry = cls(
            full_path=data['full_path'],
            location=data['location'],
            name=data['name'],
            extension=data['extension'],
            timestamp=data['timestamp'],
            size=data['size'],
            checksum=data['checksum'],
            metadata={MetadataTag.create(*tag) for tag in data.get('metadata', [])},
        )
        entry.id = data['id']
        entry.validate()
        entry._keywords = {normalize_keyword(k) for k in data.get('keywords', [])}
        entry._duplicates = set(_as_ids(data.get('duplicates', [])))
        entry._potential_duplicates = set(_as_ids(data.get('potential_duplicates', [])))
        if entry.id in entry._duplicates or entry.id in entry._potential_duplicates:
            raise InvalidEntryError(f"File {entry.id} is linked to itself")
        return entry


def _as_ids(values: Iterable) -> list[int]:
    ids = []
    for value in values:
        _check_id('linked id', value)
        ids.append(value)
    return ids


@dataclass
class CatalogStats:
    """Summary counts of a catalog, derived from index sizes."""
    files: int = 0
    directories: int = 0
    keywords: int = 0
    duplicates: int = 0
    potential_duplicates: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for display or JSON output."""
        return {
            'files': self.files,
            'directories': self.directories,
            'keywords': self.keywords,
            'duplicates': self.duplicates,
            'potential_duplicates': self.potential_duplicates,
        }
