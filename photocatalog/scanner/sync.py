"""
Catalog workflows for the scanner package.

Combines the file probe with the catalog:
- add_path: catalog one file or every image in a directory
- rescan: re-probe cataloged files, tagging vanished files DELETED and
  modified files CHANGED
- resolve_duplicates: byte-confirm potential duplicates across the catalog

The catalog is single-threaded, so files are processed sequentially.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

from ..config import KEYWORD_CHANGED, KEYWORD_DELETED
from ..errors import NotFoundError
from .dependencies import make_progress_bar
from .file_discovery import PathKind, check_path, find_image_files
from .probe import ProbeStatus, probe_file

if TYPE_CHECKING:
    from ..catalog import Catalog


logger = logging.getLogger(__name__)


@dataclass
class SyncSummary:
    """Counts of what a workflow did to the catalog."""
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    changed: int = 0
    deleted: int = 0
    restored: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for display or JSON output."""
        return {
            'added': self.added,
            'updated': self.updated,
            'unchanged': self.unchanged,
            'changed': self.changed,
            'deleted': self.deleted,
            'restored': self.restored,
            'skipped': self.skipped,
            'errors': list(self.errors),
        }


def add_path(
    catalog: Catalog,
    path: str | Path,
    recursive: bool = False,
    show_progress: bool = False,
    prefer_exif_timestamp: bool = True,
) -> SyncSummary:
    """
    Add a file, or every image file in a directory, to the catalog.

    Files already cataloged are updated in place (their keywords are kept).

    Args:
        catalog: Catalog to add to
        path: File or directory
        recursive: Also add images from subdirectories
        show_progress: Show a tqdm progress bar for directories
        prefer_exif_timestamp: Passed to probe_file()

    Returns:
        SyncSummary with added / updated / skipped counts and error messages

    Raises:
        NotFoundError: If path does not exist
    """
    kind = check_path(path)
    if kind is PathKind.MISSING:
        raise NotFoundError(f"Path not found: {path}")

    if kind is PathKind.FILE:
        filepaths = [str(path)]
    else:
        filepaths = find_image_files(path, recursive=recursive)
        logger.info(f"Found {len(filepaths):,} image files in {path}")

    summary = SyncSummary()
    pbar = make_progress_bar(len(filepaths), "Adding files", "file", show_progress)

    for filepath in filepaths:
        result = probe_file(filepath, prefer_exif_timestamp=prefer_exif_timestamp)
        if result.ok:
            if catalog.add_file(result.entry):
                summary.updated += 1
            else:
                summary.added += 1
        else:
            summary.skipped += 1
            summary.errors.append(f"{result.path}: {result.message}")
            logger.debug(f"Skipped {result.path}: {result.status.value}")

        if pbar is not None:
            pbar.update(1)

    if pbar is not None:
        pbar.close()

    logger.info(
        f"Add {path}: {summary.added} added, {summary.updated} updated, {summary.skipped} skipped"
    )
    return summary


def rescan(
    catalog: Catalog,
    file_ids: Optional[Iterable[int]] = None,
    show_progress: bool = False,
    prefer_exif_timestamp: bool = True,
) -> SyncSummary:
    """
    Re-probe cataloged files and record what changed on disk.

    - A file that no longer exists gets the DELETED keyword.
    - A file whose size, checksum or timestamp changed is re-added (keeping
      its id and keywords) and gets the CHANGED keyword.
    - A DELETED file that exists again loses the DELETED keyword.

    Args:
        catalog: Catalog to rescan
        file_ids: Ids to rescan; all cataloged files if None
        show_progress: Show a tqdm progress bar
        prefer_exif_timestamp: Passed to probe_file()

    Returns:
        SyncSummary with unchanged / changed / deleted / restored counts

    Raises:
        NotFoundError: If one of file_ids is not cataloged
    """
    ids = sorted(file_ids) if file_ids is not None else [e.id for e in catalog.entries()]

    summary = SyncSummary()
    pbar = make_progress_bar(len(ids), "Rescanning", "file", show_progress)

    for file_id in ids:
        entry = catalog.get_entry(file_id)
        result = probe_file(entry.full_path, prefer_exif_timestamp=prefer_exif_timestamp)

        if result.status in (ProbeStatus.NOT_FOUND, ProbeStatus.NOT_A_FILE):
            if not entry.has_keyword(KEYWORD_DELETED):
                catalog.add_keyword(KEYWORD_DELETED, file_id)
                logger.debug(f"File {file_id} is gone: {entry.full_path}")
            summary.deleted += 1
        elif not result.ok:
            summary.skipped += 1
            summary.errors.append(f"{entry.full_path}: {result.message}")
        else:
            was_deleted = entry.has_keyword(KEYWORD_DELETED)
            fresh = result.entry
            if (fresh.size, fresh.checksum, fresh.timestamp) != (entry.size, entry.checksum, entry.timestamp):
                catalog.add_file(fresh)
                catalog.add_keyword(KEYWORD_CHANGED, file_id)
                summary.changed += 1
                logger.debug(f"File {file_id} changed: {entry.full_path}")
            else:
                summary.unchanged += 1

            if was_deleted:
                catalog.remove_keyword(KEYWORD_DELETED, file_id)
                summary.restored += 1

        if pbar is not None:
            pbar.update(1)

    if pbar is not None:
        pbar.close()

    logger.info(
        f"Rescan: {summary.unchanged} unchanged, {summary.changed} changed, "
        f"{summary.deleted} deleted, {summary.restored} restored"
    )
    return summary


def resolve_duplicates(
    catalog: Catalog,
    file_ids: Optional[Iterable[int]] = None,
    show_progress: bool = False,
) -> dict[int, int]:
    """
    Byte-confirm duplicates for many files.

    Each id covered by an earlier group is skipped, so every group is
    compared only once.

    Args:
        catalog: Catalog to process
        file_ids: Ids to process; by default every id with a potential or
            confirmed duplicate
        show_progress: Show a tqdm progress bar

    Returns:
        Mapping of id to number of confirmed duplicates, for every id that
        has at least one

    Raises:
        NotFoundError: If one of file_ids is not cataloged
    """
    if file_ids is None:
        file_ids = catalog.potential_duplicate_ids() | catalog.duplicate_ids()
    ids = sorted(file_ids)

    results: dict[int, int] = {}
    pbar = make_progress_bar(len(ids), "Comparing files", "file", show_progress)

    for file_id in ids:
        if file_id not in results:
            results.update(catalog.process_duplicates(file_id))
        if pbar is not None:
            pbar.update(1)

    if pbar is not None:
        pbar.close()

    groups = len({frozenset(catalog.get_entry(i).duplicates | {i}) for i in results})
    logger.info(f"Confirmed {len(results)} duplicate files in {groups} groups")
    return results


__all__ = [
    'SyncSummary',
    'add_path',
    'rescan',
    'resolve_duplicates',
]
