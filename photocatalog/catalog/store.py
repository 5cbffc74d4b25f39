"""
File persistence for catalog snapshots.

CatalogStore reads and writes one JSON snapshot file. Writes are atomic: the
snapshot is written to a temporary file in the target directory and moved
over the old one, so an interrupted save never leaves a truncated catalog.
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..config import DEFAULT_DB_FILENAME, DEFAULT_DB_SUFFIX
from ..errors import (
    PersistenceIOError,
    SnapshotAbsentError,
    SnapshotCorruptError,
)
from .core import Catalog, Comparator
from .snapshot import catalog_from_snapshot, catalog_to_snapshot


logger = logging.getLogger(__name__)


class LoadStatus(Enum):
    """Outcome of opening a catalog file."""
    LOADED = 'loaded'
    ABSENT = 'absent'
    CORRUPT = 'corrupt'
    READ_ERROR = 'read_error'


def resolve_db_filename(name: Optional[Union[str, Path]] = None) -> Path:
    """
    Resolve the catalog file name.

    A name without a suffix gets the default '.json' suffix appended.

    Example:
        resolve_db_filename('photos')      # Path('photos.json')
        resolve_db_filename('photos.db')   # Path('photos.db')
        resolve_db_filename()              # Path('photo_db.json')
    """
    path = Path(name) if name else Path(DEFAULT_DB_FILENAME)
    if not path.suffix:
        path = path.with_name(path.name + DEFAULT_DB_SUFFIX)
    return path.expanduser()


class CatalogStore:
    """
    Loads and saves a catalog snapshot file.

    Usage:
        store = CatalogStore('photo_db.json')
        catalog = store.load()
        ...
        store.save(catalog)
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"CatalogStore({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.is_file()

    def _file_mode(self) -> int:
        """Permission bits for the saved file: those of the file being replaced, else the umask default."""
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def load(self, comparator: Optional[Comparator] = None) -> Catalog:
        """
        Load the catalog from the snapshot file.

        Args:
            comparator: Comparator for the loaded catalog

        Returns:
            The loaded catalog (not dirty)

        Raises:
            SnapshotAbsentError: If the file does not exist
            SnapshotCorruptError: If the file is not a valid snapshot
            PersistenceIOError: If the file cannot be read
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            raise SnapshotAbsentError(f"No catalog at {self.path}", self.path) from None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SnapshotCorruptError(f"Catalog file {self.path} is not valid JSON: {e}", self.path) from e
        except OSError as e:
            raise PersistenceIOError(f"Could not read {self.path}: {e}", self.path) from e

        try:
            catalog = catalog_from_snapshot(data, comparator=comparator)
        except SnapshotCorruptError as e:
            e.path = self.path
            raise

        logger.info(f"Loaded catalog with {len(catalog)} files from {self.path}")
        return catalog

    def save(self, catalog: Catalog) -> None:
        """
        Save the catalog atomically and mark it as saved.

        Raises:
            PersistenceIOError: If the file cannot be written. The catalog
                stays dirty and the previous file is left untouched.
        """
        data = catalog_to_snapshot(catalog)
        directory = self.path.parent
        temp_path = None

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix='.tmp', dir=directory
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=1)
            os.chmod(temp_path, self._file_mode())
            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)
            raise PersistenceIOError(f"Could not write {self.path}: {e}", self.path) from e

        catalog.mark_saved()
        logger.info(f"Saved catalog with {len(catalog)} files to {self.path}")


def open_catalog(
    path: Union[str, Path],
    comparator: Optional[Comparator] = None,
) -> tuple[Catalog, LoadStatus]:
    """
    Open the catalog at path, falling back to an empty catalog.

    An absent file is the normal first-run case. A corrupt or unreadable file
    also yields an empty catalog, but the status tells the caller that the
    persisted data was not loaded, so it can warn before overwriting it.

    Args:
        path: Snapshot file
        comparator: Comparator for the catalog

    Returns:
        Tuple of (catalog, load status)
    """
    store = CatalogStore(path)
    try:
        return store.load(comparator=comparator), LoadStatus.LOADED
    except SnapshotAbsentError:
        logger.warning(f"No catalog found at {store.path}, starting with an empty catalog")
        return Catalog(comparator=comparator), LoadStatus.ABSENT
    except SnapshotCorruptError as e:
        logger.error(f"Catalog {store.path} is corrupt and was not loaded: {e}")
        return Catalog(comparator=comparator), LoadStatus.CORRUPT
    except PersistenceIOError as e:
        logger.error(f"Catalog {store.path} could not be read: {e}")
        return Catalog(comparator=comparator), LoadStatus.READ_ERROR


__all__ = [
    'CatalogStore',
    'LoadStatus',
    'open_catalog',
    'resolve_db_filename',
]
