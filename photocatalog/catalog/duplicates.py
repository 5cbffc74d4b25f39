"""
Duplicate detection for the catalog.

Detection runs in two phases:
1. Potential duplicates: on insertion, every entry sharing the new entry's
   size and checksum is linked to it and both are tagged DUP?.
2. Confirmed duplicates: on request, the potential duplicates of one entry are
   byte-compared with it; the confirmed group becomes a clique of DUP links.

Both relations are stored as id sets on the entries and are always updated on
both endpoints.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config import KEYWORD_DUPLICATE, KEYWORD_POTENTIAL_DUPLICATE
from ..models import CatalogEntry

if TYPE_CHECKING:
    from .core import Catalog


logger = logging.getLogger(__name__)


class DuplicateOperations:
    """
    Maintains the duplicate and potential-duplicate relations of a catalog.

    Also owns the global sets of ids having at least one confirmed or
    potential duplicate, which back the catalog statistics.
    """

    def __init__(self, catalog: Catalog):
        """
        Initialize duplicate operations.

        Args:
            catalog: The Catalog whose entries and keywords are maintained
        """
        self.catalog = catalog
        self.confirmed_ids: set[int] = set()
        self.potential_ids: set[int] = set()

    def link_potential_duplicates(self, entry: CatalogEntry) -> set[int]:
        """
        Link a freshly inserted entry with every entry sharing its size and checksum.

        Args:
            entry: Entry already stored and indexed in the catalog

        Returns:
            Ids of the entries linked to it
        """
        matches = self.catalog.find_potential_duplicate_ids(entry.size, entry.checksum)
        matches.discard(entry.id)

        for peer_id in sorted(matches):
            peer = self.catalog.get_entry(peer_id)
            entry._add_potential_duplicate(peer_id)
            peer._add_potential_duplicate(entry.id)
            self.potential_ids.add(entry.id)
            self.potential_ids.add(peer_id)
            self.catalog.add_keyword(KEYWORD_POTENTIAL_DUPLICATE, entry.id)
            self.catalog.add_keyword(KEYWORD_POTENTIAL_DUPLICATE, peer_id)

        if matches:
            logger.debug(f"File {entry.id} has {len(matches)} potential duplicate(s): {sorted(matches)}")
        return matches

    def remove_duplicate_information(self, entry: CatalogEntry) -> None:
        """
        Sever every duplicate and potential-duplicate link of an entry.

        Peers left without links lose their DUP / DUP? keyword and their place
        in the global sets. Calling this twice in a row changes nothing the
        second time.
        """
        file_id = entry.id

        for peer_id in entry.duplicates:
            peer = self.catalog.get_entry(peer_id)
            peer._discard_duplicate(file_id)
            if not peer.duplicates:
                self.confirmed_ids.discard(peer_id)
                self.catalog.remove_keyword(KEYWORD_DUPLICATE, peer_id)

        for peer_id in entry.potential_duplicates:
            peer = self.catalog.get_entry(peer_id)
            peer._discard_potential_duplicate(file_id)
            if not peer.potential_duplicates:
                self.potential_ids.discard(peer_id)
                self.catalog.remove_keyword(KEYWORD_POTENTIAL_DUPLICATE, peer_id)

        entry._clear_duplicate_links()
        self.confirmed_ids.discard(file_id)
        self.potential_ids.discard(file_id)
        self.catalog.remove_keyword(KEYWORD_DUPLICATE, file_id)
        self.catalog.remove_keyword(KEYWORD_POTENTIAL_DUPLICATE, file_id)

    def process_duplicates(self, file_id: int) -> dict[int, int]:
        """
        Confirm the duplicates of one entry by byte comparison.

        Every entry sharing size and checksum with file_id is compared with it
        using the catalog's comparator. When at least one is identical, all
        members of the group lose their previous links and are linked with
        each other as confirmed duplicates (DUP).

        Args:
            file_id: Id of the entry to process

        Returns:
            Mapping of every group member's id to its number of duplicates,
            or an empty dict when the entry has no duplicate

        Raises:
            NotFoundError: If file_id is not in the catalog
        """
        entry = self.catalog.get_entry(file_id)
        group = {file_id}

        candidates = self.catalog.find_potential_duplicate_ids(entry.size, entry.checksum)
        candidates.discard(file_id)
        for peer_id in sorted(candidates):
            peer = self.catalog.get_entry(peer_id)
            if self.catalog.comparator(entry.full_path, peer.full_path):
                group.add(peer_id)
            else:
                logger.debug(f"Files {file_id} and {peer_id} share size and checksum but differ")

        if len(group) == 1:
            self.remove_duplicate_information(entry)
            return {}

        for member_id in group:
            self.remove_duplicate_information(self.catalog.get_entry(member_id))

        for member_id in group:
            member = self.catalog.get_entry(member_id)
            for other_id in group:
                if other_id != member_id:
                    member._add_duplicate(other_id)
            self.confirmed_ids.add(member_id)
            self.catalog.add_keyword(KEYWORD_DUPLICATE, member_id)

        duplicate_count = len(group) - 1
        logger.debug(f"Confirmed duplicate group of {len(group)} files: {sorted(group)}")
        return {member_id: duplicate_count for member_id in sorted(group)}

    def rebuild(self) -> None:
        """Recompute the global duplicate sets from the entries' own links."""
        self.confirmed_ids = {e.id for e in self.catalog.entries() if e.duplicates}
        self.potential_ids = {e.id for e in self.catalog.entries() if e.potential_duplicates}

    def find_link_errors(self) -> list[str]:
        """
        Check that every link points at a cataloged entry and is mirrored.

        Returns:
            Human-readable descriptions of broken links (empty when consistent)
        """
        errors = []
        for entry in self.catalog.entries():
            for label, links, reverse in (
                ('duplicate', 'duplicates', 'duplicates'),
                ('potential duplicate', 'potential_duplicates', 'potential_duplicates'),
            ):
                for peer_id in getattr(entry, links):
                    if peer_id == entry.id:
                        errors.append(f"File {entry.id} is its own {label}")
                    elif peer_id not in self.catalog:
                        errors.append(f"File {entry.id} lists missing {label} {peer_id}")
                    elif entry.id not in getattr(self.catalog.get_entry(peer_id), reverse):
                        errors.append(f"File {entry.id} lists {label} {peer_id} but not vice versa")
        return errors


__all__ = ['DuplicateOperations']
