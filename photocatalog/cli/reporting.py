"""
Report formatting and display for the CLI interface.

Provides functions to print catalog statistics, entry details, file lists,
duplicate groups and status messages in a human-readable format.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .. import __version__
from ..catalog import Catalog, LoadStatus
from ..config import PROGRAM_NAME
from ..models import CatalogEntry, CatalogStats, format_size
from ..scanner import SyncSummary


# Messages shown for shell status codes
STATUS_MESSAGES = {
    'unknown_command': "ERROR: Unknown command. Use HELP or H for a list of available commands.",
    'invalid_arguments': "ERROR: Invalid number of arguments.",
    'path_not_found': "ERROR: Path does not exist.",
    'not_cataloged': "WARNING: Path is not in the catalog.",
    'reserved_keyword': "ERROR: This keyword is managed by the catalog and cannot be changed by hand.",
    'saved': "Changes saved successfully.",
    'no_changes': "There are no changes to save.",
    'write_error': "ERROR: An error occurred while writing to the catalog file.",
}

LOAD_STATUS_MESSAGES = {
    LoadStatus.LOADED: "Catalog loaded.",
    LoadStatus.ABSENT: "WARNING: The catalog file does not exist. A new file will be created.",
    LoadStatus.CORRUPT: "ERROR: The catalog file is in an incompatible format. Starting with an empty catalog; "
                        "saving will overwrite the old file.",
    LoadStatus.READ_ERROR: "ERROR: An error occurred while reading the catalog file. Starting with an empty catalog.",
}

HELP_TEXT = """\
List of available commands:
- HELP (H)
  Display this list of commands.
- ABOUT (AB)
  Display information about the program.
- EXIT (E, X)
  Exit the program. If there are unsaved changes, asks whether to save them.
- SAVE
  Save the catalog to its file.
- ADD (A) <path> [-r]
  Add a file, or all images in a directory (-r: include subdirectories).
  Files already in the catalog are updated and keep their keywords.
- AK <keyword> <path>
  Add a keyword to a file, or to every cataloged file in a directory.
- REMOVE (R) <path>
  Remove a file, or every cataloged file in a directory, from the catalog.
- RK <keyword> <path>
  Remove a keyword from a file, or from every cataloged file in a directory.
- LIST (L) [F|D|K <key>]
  Without arguments: list directories and keywords.
  F <path>: the file; D <directory>: files in a directory; K <keyword>: files with a keyword.
- DETAILS (D) <path>
  Show everything known about a file.
- DUPLICATES (DUP, DD) [path]
  Compare potential duplicates byte by byte and list confirmed duplicates
  (for the whole catalog, or for one file or directory).
- SCAN (S) [path]
  Rescan cataloged files: vanished files get DELETED, modified files CHANGED.
- STATS
  Show catalog statistics.
Paths containing spaces must be enclosed in double quotes."""


def status_message(code: str) -> str:
    return STATUS_MESSAGES.get(code, "WARNING: Unknown program status.")


def print_status(code: str) -> None:
    """Print the message for a shell status code."""
    print(status_message(code))


def print_load_status(status: LoadStatus, path) -> None:
    """Print the outcome of opening the catalog file."""
    print(f"{LOAD_STATUS_MESSAGES[status]} ({path})")


def print_banner() -> None:
    """Print the program name and version."""
    print()
    print(f"{PROGRAM_NAME} [v {__version__}]")
    print("Catalog image files, tag them with keywords and find duplicates.")
    print()


def print_help() -> None:
    print(HELP_TEXT)


def print_statistics(stats: CatalogStats) -> None:
    """Print the catalog statistics block."""
    print(f"Files:                {stats.files:,}")
    print(f"Directories:          {stats.directories:,}")
    print(f"Keywords:             {stats.keywords:,}")
    print(f"Duplicates:           {stats.duplicates:,}")
    print(f"Potential duplicates: {stats.potential_duplicates:,}")


def print_entry_details(entry: CatalogEntry) -> None:
    """
    Print all stored information about one entry.

    Metadata tags are grouped by directory and sorted by tag name.
    """
    print(f"ID:         {entry.id}")
    print(f"Path:       {entry.full_path}")
    print(f"Directory:  {entry.location}")
    print(f"Name:       {entry.name}")
    print(f"Extension:  {entry.extension}")
    print(f"Timestamp:  {entry.timestamp}")
    print(f"Size:       {entry.size:,} bytes ({entry.size_formatted})")
    print(f"Checksum:   {entry.checksum_hex}")
    print(f"Keywords:   {', '.join(sorted(entry.keywords)) or '-'}")
    print(f"Duplicates: {_format_ids(entry.duplicates)}")
    print(f"Potential duplicates: {_format_ids(entry.potential_duplicates)}")

    if entry.metadata:
        print("Metadata:")
        current_directory = None
        for tag in sorted(entry.metadata):
            if tag.directory != current_directory:
                current_directory = tag.directory
                print(f"  [{current_directory}]")
            print(f"    {tag.tag}: {tag.description}")


def _format_ids(file_ids: Iterable[int]) -> str:
    return ', '.join(str(i) for i in sorted(file_ids)) or '-'


def print_names(title: str, names: list[str]) -> None:
    """Print a titled list of names (directories, keywords)."""
    print(f"{title} ({len(names)}):")
    for name in names:
        print(f"  {name}")


def print_file_list(catalog: Catalog, file_ids: Optional[Iterable[int]], title: str) -> None:
    """
    Print the files with the given ids, ordered by path.

    A None id set (lookup found nothing) prints an empty list.
    """
    entries = sorted(
        (catalog.get_entry(file_id) for file_id in (file_ids or ())),
        key=lambda e: e.full_path,
    )
    print(f"{title} ({len(entries)} files):")
    for entry in entries:
        keywords = f"  [{', '.join(sorted(entry.keywords))}]" if entry.keywords else ""
        print(f"  {entry.id:>6}  {entry.full_path}{keywords}")


def print_duplicate_report(catalog: Catalog, results: dict[int, int]) -> None:
    """
    Print confirmed duplicate groups.

    Args:
        catalog: Catalog holding the entries
        results: Mapping of id to duplicate count, as returned by
            resolve_duplicates() or Catalog.process_duplicates()
    """
    groups = []
    seen = set()
    for file_id in sorted(results):
        if file_id in seen:
            continue
        entry = catalog.get_entry(file_id)
        group = sorted(entry.duplicates | {file_id})
        seen.update(group)
        groups.append(group)

    print("\n" + "=" * 70)
    print("DUPLICATE REPORT")
    print("=" * 70)

    total_waste = 0
    for number, group in enumerate(groups, 1):
        members = [catalog.get_entry(i) for i in group]
        print(f"\nGroup {number} ({len(members)} files, {format_size(members[0].size)} each):")
        for member in members:
            print(f"  {member.id:>6}  {member.full_path}")
        total_waste += members[0].size * (len(members) - 1)

    if not groups:
        print("\nNo duplicates found.")

    print("\n" + "=" * 70)
    print(f"Duplicate files: {len(results)} in {len(groups)} groups")
    print(f"Total space recoverable: {format_size(total_waste)}")
    print("=" * 70)


def print_sync_summary(title: str, summary: SyncSummary) -> None:
    """Print the non-zero counts of a workflow summary and its errors."""
    counts = {k: v for k, v in summary.to_dict().items() if k != 'errors' and v}
    details = ', '.join(f"{value} {name}" for name, value in counts.items()) or 'nothing to do'
    print(f"{title}: {details}")
    for error in summary.errors:
        print(f"  WARNING: {error}")


__all__ = [
    'STATUS_MESSAGES',
    'LOAD_STATUS_MESSAGES',
    'HELP_TEXT',
    'status_message',
    'print_status',
    'print_load_status',
    'print_banner',
    'print_help',
    'print_statistics',
    'print_entry_details',
    'print_names',
    'print_file_list',
    'print_duplicate_report',
    'print_sync_summary',
]
